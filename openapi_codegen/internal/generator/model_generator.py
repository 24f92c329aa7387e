import json
import logging
from typing import Dict, List, Sequence

from ...exceptions import UnsupportedSchemaError
from ..types.document import Components, Schema
from ..types.models import CodeBlock, Parameter, Project, Variable
from ..types.type_mapper import UsageContext, map_schema, wrap_optional
from ..utils.naming import escape_identifier, pascal_case, snake_case

logger = logging.getLogger(__name__)

MODEL_IMPORTS = [
    "from __future__ import annotations",
    "",
    "from datetime import datetime",
    "from typing import Any, Dict, List, Optional",
    "",
    "from pydantic import BaseModel, ConfigDict, Field",
    "",
    "from ..primitives import Base64Uuid, Float32, Float64, Int32, Int64, SecureString",
]

# Импорт после классов: аннотации вида models.Item разрешаются в model_rebuild
MODELS_IMPORT = "from .. import models  # noqa: E402"

# Имена модуля модели, которые поле не должно перекрывать
MODULE_NAMES = frozenset(
    {
        "models",
        "datetime",
        "Any",
        "Dict",
        "List",
        "Optional",
        "BaseModel",
        "ConfigDict",
        "Field",
        "Base64Uuid",
        "Float32",
        "Float64",
        "Int32",
        "Int64",
        "SecureString",
        "str",
        "bytes",
        "bool",
        "int",
        "float",
    }
)

# Общий для всех моделей набор возможностей: копирование, repr, (де)сериализация
MODEL_CONFIG = "model_config = ConfigDict(populate_by_name=True)"


class ModelGenerator:
    """Генерация pydantic моделей из components/schemas"""

    def __init__(
        self,
        components: Components,
        project: Project,
        package_dir: str,
        extra_models: Sequence[str] = (),
    ):
        self.components = components
        self.project = project
        self.package_dir = package_dir
        self.extra_models = list(extra_models)
        self.models: Dict[str, str] = {}  # имя класса -> имя файла

    def generate(self) -> List[str]:
        """Файл на каждую схему + models/__init__.py. Возвращает имена моделей"""
        for name, schema in self.components.schemas.items():
            self._generate_model(name, schema)

        self._generate_init()
        return list(self.models)

    def _generate_model(self, name: str, schema: Schema):
        class_name = pascal_case(name)
        file_name = snake_case(name) or class_name.lower()

        if class_name in self.models or file_name in self.models.values():
            raise UnsupportedSchemaError(
                f'model name "{class_name}" is already used by another schema',
                f"#/components/schemas/{name}",
            )
        self.models[class_name] = file_name

        model_file = self.project.add_file(
            f"{self.package_dir}/models/{file_name}.py"
        )
        model_file.imports.extend(MODEL_IMPORTS)
        model_file.add_code_block(CodeBlock(code=MODELS_IMPORT, order=-1))

        model_class = model_file.add_class(
            class_name, inherits=["BaseModel"], description=schema.description
        )
        model_class.add_code_block(CodeBlock(code=MODEL_CONFIG, order=1))

        if schema.properties is None:
            logger.warning("%s had no object. probably an enum?", name)
            return

        identifiers: Dict[str, str] = {}  # имя поля -> имя на проводе
        for field_name, field_schema in schema.properties.items():
            field = self._generate_field(name, field_name, field_schema, schema.required)

            # userName и user_name дают одно имя поля, второе получает номер
            if field.name in identifiers:
                index = 2
                while f"{field.name}_{index}" in identifiers:
                    index += 1
                renamed = f"{field.name}_{index}"
                logger.warning(
                    "%s.%s clashes with %s.%s, field renamed to %s",
                    name,
                    field_name,
                    name,
                    identifiers[field.name],
                    renamed,
                )
                field.name = renamed

            identifiers[field.name] = field_name
            model_class.parameters.append(field)

    def _generate_field(
        self,
        model_name: str,
        field_name: str,
        field_schema,
        required_list: List[str],
    ) -> Parameter:
        """Поле модели: имя без конфликтов с ключевыми словами, тип и alias"""
        location = f"{model_name}.{field_name}"

        if not isinstance(field_schema, Schema):
            raise UnsupportedSchemaError(
                "boolean schema is not supported for model fields", location
            )

        required = field_name in required_list
        field_type = wrap_optional(
            map_schema(field_schema, UsageContext.OWNED, field=location), required
        )

        # Имя на проводе сохраняется всегда, даже если совпадает с именем поля
        if required:
            default = f"Field(alias={json.dumps(field_name)})"
        else:
            default = f"Field(default=None, alias={json.dumps(field_name)})"

        return Parameter(
            name=escape_identifier(field_name, extra=MODULE_NAMES),
            var_type=field_type.expression,
            default=Variable(value=default),
        )

    def _generate_init(self):
        """models/__init__.py: экспорт моделей и разрешение ссылок между ними"""
        models_init = self.project.add_file(f"{self.package_dir}/models/__init__.py")
        models_init.imports.append("# Auto-generated models")

        for class_name, file_name in self.models.items():
            models_init.imports.append(f"from .{file_name} import {class_name}")

        for module in self.extra_models:
            models_init.imports.append(f"from {module} import *  # noqa: F401,F403")

        models_init.add_code_block(
            CodeBlock(code=f"__all__ = {json.dumps(list(self.models))}", order=1)
        )

        if self.models:
            models_init.add_code_block(
                CodeBlock(
                    code="\n".join(
                        f"{class_name}.model_rebuild()" for class_name in self.models
                    )
                )
            )
