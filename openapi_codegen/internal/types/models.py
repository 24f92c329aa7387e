import textwrap
from typing import Optional, Union

from pydantic import BaseModel, field_validator


INDENT = "    "


class Variable(BaseModel):
    """Выражение типа или значения: `value` или `wrap_name[value, ...]`"""

    value: list[Union["Variable", str]] = []
    wrap_name: Optional[str] = None

    @field_validator("value", mode="before")
    def value_check(cls, value):
        _value = value

        if not isinstance(value, list):
            _value = [value]

        return _value

    def __str__(self):
        _value = ", ".join([str(_) for _ in self.value])

        if self.wrap_name is None:
            return _value

        return f"{self.wrap_name}[{_value}]"


Variable.model_rebuild()


class Parameter(BaseModel):
    name: str

    default: Optional[Variable] = None
    var_type: Optional[Variable] = None
    description: Optional[str] = None

    order: int = 0

    def set_default(self, default: Union[str, Variable], **kwargs):
        if isinstance(default, str):
            default = Variable(value=default, **kwargs)

        self.default = default

    def set_type(self, var_type: Union[str, Variable], **kwargs):
        if isinstance(var_type, str):
            var_type = Variable(value=var_type, **kwargs)

        self.var_type = var_type

    def __str__(self):
        return (
            self.name
            + (f": {self.var_type}" if self.var_type else "")
            + (f" = {self.default}" if self.default else "")
        )


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", INDENT)


def _docstring(description: Optional[str], params: list[Parameter] = ()) -> str:
    """Docstring из описания OpenAPI и описаний параметров"""
    documented = [p for p in params if p.description]

    if not description and not documented:
        return ""

    lines = ['"""']

    if description:
        description = description.replace("\\", "\\\\").replace('"""', r'\"\"\"')
        lines.extend(description.strip().splitlines())

    if documented:
        if description:
            lines.append("")
        lines.append("Args:")
        for param in documented:
            lines.append(f"{INDENT}{param.name}: {' '.join(param.description.split())}")

    lines.append('"""')
    return "\n".join(lines)


class Function(BaseModel):
    name: str
    parameters: list[Parameter] = []
    response: str = "None"

    async_def: bool = False
    decorators: list[str] = []

    description: Optional[str] = None

    code: CodeBlock = CodeBlock(order=0, code="pass")
    order: int = 0

    def __str__(self) -> str:
        # Параметры без значения по умолчанию идут первыми
        parameters = sorted(self.parameters, key=lambda x: bool(x.default))
        many_parameters = len(parameters) > 1

        if many_parameters:
            signature = (
                "(\n" + "".join(f"{INDENT}{p},\n" for p in parameters) + ")"
            )
        else:
            signature = "(" + ", ".join(map(str, parameters)) + ")"

        body = "\n\n".join(
            filter(bool, [_docstring(self.description, parameters), str(self.code)])
        )

        return (
            "".join(f"{decorator}\n" for decorator in self.decorators)
            + f"{'async ' if self.async_def else ''}def {self.name}{signature}"
            + f" -> {self.response}:\n"
            + textwrap.indent(body, INDENT)
        ).replace("\t", INDENT)

    def set_code_block(self, code_block: Union["CodeBlock", str]) -> "Function":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block)

        self.code = code_block
        return self


class Class(BaseModel):
    name: str

    functions: dict[str, "Function"] = {}
    code_blocks: list["CodeBlock"] = []
    parameters: list[Parameter] = []

    inherits: list[str] = []
    description: Optional[str] = None

    order: int = 0

    def __str__(self) -> str:
        sections = [
            _docstring(self.description),
            "\n".join(
                map(
                    str,
                    sorted(self.code_blocks, key=lambda x: x.order, reverse=True),
                )
            ),
            "\n".join(map(str, self.parameters)),
        ]
        sections.extend(map(str, self.functions.values()))

        body = "\n\n".join(filter(bool, sections)) or "pass"

        return (
            f"class {self.name}"
            + (f"({', '.join(self.inherits)})" if self.inherits else "")
            + ":\n"
            + textwrap.indent(body, INDENT)
        ).replace("\t", INDENT)

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions[function.name] = function

        return function

    def add_code_block(
        self, code_block: Union["CodeBlock", str], **kwargs
    ) -> "Class":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self


class CodeFile(BaseModel):
    file_name: str

    imports: list[str] = []
    functions: dict[str, "Function"] = {}
    classes: dict[str, "Class"] = {}
    code_blocks: list["CodeBlock"] = []

    def __str__(self):
        text = "\n\n\n".join(
            filter(
                bool,
                [
                    ("\n".join(self.imports) if self.imports else ""),
                    *map(
                        str,
                        sorted(
                            (
                                self.code_blocks
                                + list(self.functions.values())
                                + list(self.classes.values())
                            ),
                            key=lambda x: x.order,
                            reverse=True,
                        ),
                    ),
                ],
            )
        ).replace("\t", INDENT)

        return text.rstrip("\n") + "\n"

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions[function.name] = function

        return function

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        self.classes[cls.name] = cls

        return cls

    def add_code_block(
        self, code_block: Union["CodeBlock", str], **kwargs
    ) -> "CodeFile":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self


class Project(BaseModel):
    name: str
    files: list[CodeFile] = []

    def add_file(self, file_name: Union["CodeFile", str], **kwargs) -> "CodeFile":
        if isinstance(file_name, str):
            code_file = CodeFile(file_name=file_name, **kwargs)
        else:
            code_file = file_name

        self.files.append(code_file)

        return code_file

    def get_file(self, file_name: str) -> Optional[CodeFile]:
        for code_file in self.files:
            if code_file.file_name == file_name:
                return code_file
        return None
