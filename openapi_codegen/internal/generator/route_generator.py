"""
Генерация async функций для каждой операции OpenAPI (routes.py)

Каждая функция принимает ApiClient первым аргументом, собирает запрос через
RequestBuilder и декодирует ответ 200 в тип, полученный из схемы.
"""

import json
import keyword
import logging
import re
from typing import Dict, List, Optional, Tuple

from ...exceptions import (
    DuplicateOperationError,
    MissingOperationIdError,
    TaxonomyMismatchError,
    UnresolvedReferenceError,
    UnsupportedMediaTypeError,
    UnsupportedSchemaError,
)
from ..types.document import (
    Document,
    InstanceType,
    MediaType,
    Operation,
    PathItem,
    Schema,
)
from ..types.document import Parameter as ParameterObject
from ..types.models import CodeBlock, Function, Parameter, Project, Variable
from ..types.resolver import (
    EntityKind,
    ResolveTarget,
    pointer_of,
    reference_kind,
    resolve,
)
from ..types.type_mapper import (
    MappedType,
    TypeKind,
    UsageContext,
    map_schema,
    reference_name_to_models_path,
    wrap_optional,
)
from ..utils.naming import escape_identifier, snake_case

logger = logging.getLogger(__name__)

ROUTE_IMPORTS = [
    "from __future__ import annotations",
    "",
    "import json",
    "from datetime import datetime",
    "from typing import Any, Dict, List, Optional",
    "",
    "from pydantic import TypeAdapter",
    "",
    "from . import models",
    "from .clients import ApiClient",
    "from .primitives import Base64Uuid, Float32, Float64, Int32, Int64, SecureString",
]

# Имена уровня модуля routes.py, которые не должны перекрываться
MODULE_NAMES = frozenset(
    {
        "json",
        "datetime",
        "models",
        "TypeAdapter",
        "ApiClient",
        "Any",
        "Dict",
        "List",
        "Optional",
        "Base64Uuid",
        "Float32",
        "Float64",
        "Int32",
        "Int64",
        "SecureString",
        "annotations",
    }
)

# Локальные имена тела функции и встроенные типы из аннотаций
LOCAL_NAMES = MODULE_NAMES | {
    "client",
    "builder",
    "response",
    "payload",
    "str",
    "bytes",
    "bool",
    "int",
    "float",
}

# Имена, которые экспортирует __init__.py сгенерированного пакета рядом с функциями
PACKAGE_EXPORTS = frozenset(
    {"ApiClient", "ApiClientBuilder", "RequestBuilder", "default_config", "models"}
)

# Поддерживаемые media type тела запроса
REQUEST_MEDIA_TYPES = (
    "application/json",
    "multipart/form-data",
    "application/octet-stream",
)

PATH_ARGUMENT = re.compile(r"\{(.*?)\}")


class ResponseKind:
    NONE = "none"
    JSON = "json"
    TEXT = "text"
    BYTES = "bytes"


# Преобразование значения query параметра в строку по категории типа
QUERY_CONVERTERS = {
    TypeKind.TIMESTAMP: "{}.isoformat()",
    TypeKind.MAP: "json.dumps({})",
    TypeKind.BOOLEAN: "json.dumps({})",
    TypeKind.INTEGER: "str({})",
    TypeKind.FLOAT: "str({})",
    TypeKind.SECRET: "{}.get_secret_value()",
    TypeKind.RECORD: "{}.model_dump_json(by_alias=True)",
    TypeKind.BYTES: "{}.decode()",
}


def function_name(operation_id: str) -> str:
    """
    Имя функции из operationId.

    Examples:
        >>> function_name("getItem")
        'get_item'
        >>> function_name("import")
        'import_'
    """
    name = snake_case(operation_id) or "operation"

    if name[0].isdigit():
        name = f"operation_{name}"

    if keyword.iskeyword(name) or name in MODULE_NAMES or name in PACKAGE_EXPORTS:
        name += "_"

    return name


def parameter_identifier(name: str) -> str:
    return escape_identifier(name, extra=LOCAL_NAMES)


class RouteGenerator:
    """Генерация routes.py"""

    def __init__(self, document: Document, project: Project, package_dir: str):
        self.document = document
        self.components = document.components
        self.project = project
        self.package_dir = package_dir

        self.routes_file = None
        self.operation_ids: Dict[str, Tuple[str, str]] = {}
        self.function_names: Dict[str, str] = {}

    def generate(self) -> List[str]:
        """Файл routes.py; возвращает имена сгенерированных функций"""
        self.routes_file = self.project.add_file(f"{self.package_dir}/routes.py")
        self.routes_file.imports.extend(ROUTE_IMPORTS)

        # order определяет порядок вывода: ранние функции получают больший order
        order = sum(len(item.operations()) for item in self.document.paths.values())

        for path, path_item in self.document.paths.items():
            for method, operation in path_item.operations():
                function = self.generate_route(path, path_item, method, operation)
                function.order = order
                order -= 1
                self.routes_file.add_function(function)

        return list(self.routes_file.functions)

    def generate_route(
        self, path: str, path_item: PathItem, method: str, operation: Operation
    ) -> Function:
        location = f"{method} {path}"

        if not operation.operation_id:
            raise MissingOperationIdError(method, path)

        name = self._register_operation(operation.operation_id, method, path)
        logger.debug("Generating %s for %s", name, location)

        function = Function(
            name=name,
            async_def=True,
            description=operation.description or operation.summary,
        )
        function.parameters.append(
            Parameter(name="client", var_type=Variable(value="ApiClient"))
        )

        parameters = self._collect_parameters(path_item, operation, location)
        identifiers = self._parameter_identifiers(parameters, location)
        typed_parameters = []

        for parameter in parameters:
            if parameter.schema_ is None:
                # content вместо schema не типизируется
                logger.debug(
                    "Parameter %s of %s has no schema, skipped", parameter.name, location
                )
                continue

            mapped = map_schema(
                parameter.schema_,
                UsageContext.BORROWED_PARAMETER,
                field=f"{location} parameter {parameter.name}",
            )
            typed_parameters.append((parameter, mapped))

            function.parameters.append(
                Parameter(
                    name=identifiers[(parameter.name, parameter.location)],
                    var_type=wrap_optional(mapped, parameter.required).expression,
                    default=None if parameter.required else Variable(value="None"),
                    description=parameter.description,
                )
            )

        body_media = self._request_body(operation, location)
        if body_media is not None:
            media_type, payload_type = body_media
            function.parameters.append(
                Parameter(name="payload", var_type=payload_type.expression)
            )
        else:
            media_type = None

        response_kind, response_type = self._response_type(operation, location)
        function.response = str(response_type)

        code = [self._request_line(method, path, identifiers)]
        code.extend(self._query_lines(typed_parameters, identifiers, location))

        if media_type == "application/json":
            code.append("builder.json(payload)")
        elif media_type == "multipart/form-data":
            code.append("builder.form(payload)")
        elif media_type == "application/octet-stream":
            code.append("builder.body(payload)")

        code.append("response = await builder.send()")

        if response_kind == ResponseKind.JSON:
            code.append(
                f"return TypeAdapter({response_type}).validate_json(response.content)"
            )
        elif response_kind == ResponseKind.TEXT:
            code.append("return response.text")
        elif response_kind == ResponseKind.BYTES:
            code.append("return response.content")

        function.set_code_block(CodeBlock(code="\n".join(code)))
        return function

    def _register_operation(self, operation_id: str, method: str, path: str) -> str:
        if operation_id in self.operation_ids:
            raise DuplicateOperationError(operation_id, method, path)

        name = function_name(operation_id)
        if name in self.function_names:
            raise DuplicateOperationError(operation_id, method, path)

        self.operation_ids[operation_id] = (method, path)
        self.function_names[name] = operation_id
        return name

    def _collect_parameters(
        self, path_item: PathItem, operation: Operation, location: str
    ) -> List[ParameterObject]:
        """
        Общие параметры пути + параметры операции.

        Параметр операции с тем же (name, in) заменяет общий на его месте,
        необязательные параметры идут после обязательных.
        """
        merged: Dict[Tuple[str, str], ParameterObject] = {}

        for handle in list(path_item.parameters) + list(operation.parameters):
            parameter = self._resolve_parameter(handle, location)
            if parameter is None:
                continue
            merged[(parameter.name, parameter.location)] = parameter

        parameters = list(merged.values())
        return [p for p in parameters if p.required] + [
            p for p in parameters if not p.required
        ]

    @staticmethod
    def _parameter_identifiers(
        parameters: List[ParameterObject], location: str
    ) -> Dict[Tuple[str, str], str]:
        """
        Имена аргументов функции для параметров.

        Параметры с одинаковым именем Python (`id` в path и query, `userId` и
        `user_id`) получают суффикс `_<in>`, при повторе еще и номер.
        """
        identifiers: Dict[Tuple[str, str], str] = {}
        used = set()

        for parameter in parameters:
            identifier = parameter_identifier(parameter.name)

            if identifier in used:
                renamed = f"{identifier}_{snake_case(parameter.location)}"
                index = 2
                while renamed in used:
                    renamed = f"{identifier}_{snake_case(parameter.location)}_{index}"
                    index += 1

                logger.warning(
                    "Parameter %s (%s) of %s clashes with another parameter, renamed to %s",
                    parameter.name,
                    parameter.location,
                    location,
                    renamed,
                )
                identifier = renamed

            used.add(identifier)
            identifiers[(parameter.name, parameter.location)] = identifier

        return identifiers

    def _resolve_parameter(self, handle, location: str) -> Optional[ParameterObject]:
        resolved = resolve(ResolveTarget.parameter(handle), self.components)

        if resolved is None:
            reference = pointer_of(handle)
            if reference is None or reference_kind(reference) is None:
                return None
            raise UnresolvedReferenceError(reference, location)

        if resolved.kind is not EntityKind.PARAMETER:
            raise TaxonomyMismatchError(
                EntityKind.PARAMETER.value, resolved.kind.value, location
            )

        return resolved.entity

    def _request_body(
        self, operation: Operation, location: str
    ) -> Optional[Tuple[str, MappedType]]:
        """Выбранный media type тела запроса и тип параметра payload"""
        if operation.request_body is None:
            return None

        resolved = resolve(
            ResolveTarget.request_body(operation.request_body), self.components
        )

        if resolved is None:
            reference = pointer_of(operation.request_body)
            if reference is None or reference_kind(reference) is None:
                return None
            raise UnresolvedReferenceError(reference, location)

        if resolved.kind is not EntityKind.REQUEST_BODY:
            raise TaxonomyMismatchError(
                EntityKind.REQUEST_BODY.value, resolved.kind.value, location
            )

        content: Dict[str, MediaType] = resolved.entity.content

        for content_type in content:
            if content_type not in REQUEST_MEDIA_TYPES:
                logger.warning(
                    'found "%s", expected json, form data or octet stream',
                    content_type,
                )

        # Первый подходящий media type в порядке документа
        media_type = next((m for m in content if m in REQUEST_MEDIA_TYPES), None)
        if media_type is None:
            raise UnsupportedMediaTypeError(location, content)

        schema = content[media_type].schema_
        if schema is None:
            raise UnsupportedSchemaError("need a schema", f"{location} request body")

        return media_type, self._payload_type(schema, location)

    def _payload_type(self, schema: Schema, location: str) -> MappedType:
        field = f"{location} request body"

        if schema.reference:
            return MappedType(
                expression=Variable(
                    value=reference_name_to_models_path(schema.reference)
                ),
                kind=TypeKind.RECORD,
            )

        if (
            schema.single_instance_type is InstanceType.ARRAY
            or schema.array_items is not None
        ):
            return self._array_type(schema, UsageContext.BORROWED_PARAMETER, field)

        return map_schema(schema, UsageContext.BORROWED_PARAMETER, field=field)

    @staticmethod
    def _array_type(schema: Schema, usage: UsageContext, field: str) -> MappedType:
        items = schema.array_items

        if items is None:
            raise UnsupportedSchemaError("array but no items?", field)
        if isinstance(items, list):
            raise UnsupportedSchemaError(
                "array with a list of item schemas is not supported", field
            )
        if isinstance(items, bool):
            raise UnsupportedSchemaError("simple boolean array is unsupported", field)

        item_type = map_schema(items, usage, field=field)
        return MappedType(
            expression=Variable(value=item_type.expression, wrap_name="List"),
            kind=TypeKind.LIST,
            owned=item_type.owned,
        )

    def _response_type(self, operation: Operation, location: str):
        """Категория и тип ответа 200"""
        unit = Variable(value="None")
        handle = operation.responses.get("200")

        resolved = resolve(ResolveTarget.response(handle), self.components)

        if resolved is None:
            reference = pointer_of(handle)
            if reference is not None and reference_kind(reference) is not None:
                raise UnresolvedReferenceError(reference, location)
            return ResponseKind.NONE, unit

        if resolved.kind is not EntityKind.RESPONSE:
            raise TaxonomyMismatchError(
                EntityKind.RESPONSE.value, resolved.kind.value, location
            )

        content: Dict[str, MediaType] = resolved.entity.content

        if not content:
            return ResponseKind.NONE, unit

        if "application/json" in content:
            schema = content["application/json"].schema_
            if schema is None:
                raise UnsupportedSchemaError("need a schema", f"{location} response")

            mapped = self._json_response_type(schema, f"{location} response")
            if mapped.kind is TypeKind.UNIT:
                return ResponseKind.NONE, unit
            return ResponseKind.JSON, mapped.expression

        if "text/plain" in content:
            return ResponseKind.TEXT, Variable(value="str")

        # octet-stream и так получает bytes, предупреждение не нужно
        if "application/octet-stream" not in content:
            logger.warning(
                "unknown response mime type(s), falling back to `bytes`: %s",
                list(content),
            )

        return ResponseKind.BYTES, Variable(value="bytes")

    def _json_response_type(self, schema: Schema, field: str) -> MappedType:
        if schema.reference:
            return MappedType(
                expression=Variable(
                    value=reference_name_to_models_path(schema.reference)
                ),
                kind=TypeKind.RECORD,
            )

        if (
            schema.single_instance_type is InstanceType.ARRAY
            or schema.array_items is not None
        ):
            return self._array_type(schema, UsageContext.OWNED, field)

        return map_schema(schema, UsageContext.OWNED, field=field)

    @staticmethod
    def _request_line(
        method: str, path: str, identifiers: Dict[Tuple[str, str], str]
    ) -> str:
        """`builder = client.request(...)` с подстановкой параметров пути"""
        arguments = PATH_ARGUMENT.findall(path)
        if not arguments:
            return f"builder = client.request({json.dumps(method)}, {json.dumps(path)})"

        # Фигурные скобки вне шаблонов экранируются для f-строки
        parts = PATH_ARGUMENT.split(path)
        template = ""
        for index, part in enumerate(parts):
            if index % 2:
                identifier = identifiers.get((part, "path")) or parameter_identifier(part)
                template += "{" + identifier + "}"
            else:
                template += part.replace("{", "{{").replace("}", "}}")

        return f"builder = client.request({json.dumps(method)}, f{json.dumps(template)})"

    @staticmethod
    def _query_lines(
        typed_parameters: List[Tuple[ParameterObject, MappedType]],
        identifiers: Dict[Tuple[str, str], str],
        location: str,
    ) -> List[str]:
        lines = []

        for parameter, mapped in typed_parameters:
            if parameter.location == "path":
                continue
            if parameter.location != "query":
                logger.warning("unknown `in`: %s (%s)", parameter.location, location)
                continue

            identifier = identifiers[(parameter.name, parameter.location)]
            converter = QUERY_CONVERTERS.get(mapped.kind, "{}")
            line = f"builder.query({json.dumps(parameter.name)}, {converter.format(identifier)})"

            if parameter.required:
                lines.append(line)
            else:
                lines.append(f"if {identifier} is not None:\n\t{line}")

        return lines
