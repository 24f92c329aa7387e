"""
Сопоставление типов OpenAPI с типами Python

Порядок правил (первое совпадение побеждает):
1. format -> фиксированная таблица FORMAT_TYPES;
2. одиночный type -> INSTANCE_TYPES (array + $ref -> List[models.X]);
3. $ref -> models.<PascalName>;
4. иначе TypeMappingError.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel

from ...exceptions import TypeMappingError
from ..utils.naming import pascal_case
from .document import InstanceType, Schema
from .models import Variable

MODELS_NAMESPACE = "models"


class UsageContext(str, Enum):
    OWNED = "owned"
    BORROWED_PARAMETER = "borrowed-parameter"


class TypeKind(str, Enum):
    """Категория типа, по ней выбирается сериализация query параметров"""

    IDENTIFIER = "identifier"
    INTEGER = "integer"
    FLOAT = "float"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"
    SECRET = "secret"
    UNIT = "unit"
    BOOLEAN = "boolean"
    MAP = "map"
    LIST = "list"
    STRING = "string"
    RECORD = "record"


class MappedType(BaseModel):
    expression: Variable
    kind: TypeKind
    # False - заимствованная форма (параметр функции), True - собственное значение
    owned: bool = True
    optional: bool = False

    def __str__(self) -> str:
        return str(self.expression)


# Типы из primitives.py сгенерированного пакета
FORMAT_TYPES: Dict[str, Tuple[str, TypeKind]] = {
    "base64uuid": ("Base64Uuid", TypeKind.IDENTIFIER),
    "int32": ("Int32", TypeKind.INTEGER),
    "int64": ("Int64", TypeKind.INTEGER),
    "float": ("Float32", TypeKind.FLOAT),
    "double": ("Float64", TypeKind.FLOAT),
    # byte и binary намеренно дают один и тот же тип
    "byte": ("bytes", TypeKind.BYTES),
    "binary": ("bytes", TypeKind.BYTES),
    "date": ("datetime", TypeKind.TIMESTAMP),
    "date-time": ("datetime", TypeKind.TIMESTAMP),
    "password": ("SecureString", TypeKind.SECRET),
}

INSTANCE_TYPES: Dict[InstanceType, Tuple[Variable, TypeKind]] = {
    InstanceType.NULL: (Variable(value="None"), TypeKind.UNIT),
    InstanceType.BOOLEAN: (Variable(value="bool"), TypeKind.BOOLEAN),
    InstanceType.OBJECT: (
        Variable(value=["str", "str"], wrap_name="Dict"),
        TypeKind.MAP,
    ),
    InstanceType.ARRAY: (Variable(value="Any", wrap_name="List"), TypeKind.LIST),
    # number -> целое 64 бит, не float
    InstanceType.NUMBER: (Variable(value="Int64"), TypeKind.INTEGER),
    InstanceType.STRING: (Variable(value="str"), TypeKind.STRING),
    InstanceType.INTEGER: (Variable(value="Int32"), TypeKind.INTEGER),
}


def reference_name_to_models_path(reference: str) -> str:
    """
    `#/components/schemas/item_list` -> `models.ItemList`

    Берется последний сегмент после `/`, если `/` нет - вся строка.
    """
    _, _, name = reference.rpartition("/")
    return f"{MODELS_NAMESPACE}.{pascal_case(name)}"


def map_type(
    format: Optional[str],
    instance_type: Optional[Union[InstanceType, List[InstanceType]]],
    reference: Optional[str],
    usage: UsageContext = UsageContext.OWNED,
    field: Optional[str] = None,
    schema: Any = None,
) -> MappedType:
    """Тип Python для format / type / $ref схемы"""
    if isinstance(instance_type, str) and not isinstance(instance_type, InstanceType):
        instance_type = InstanceType(instance_type)

    if format in FORMAT_TYPES:
        expression, kind = FORMAT_TYPES[format]
        return MappedType(expression=Variable(value=expression), kind=kind)

    if isinstance(instance_type, InstanceType):
        if instance_type is InstanceType.ARRAY and reference:
            return MappedType(
                expression=Variable(
                    value=reference_name_to_models_path(reference), wrap_name="List"
                ),
                kind=TypeKind.LIST,
            )

        expression, kind = INSTANCE_TYPES[instance_type]
        return MappedType(
            expression=expression.model_copy(deep=True),
            kind=kind,
            owned=not (
                kind is TypeKind.STRING and usage is UsageContext.BORROWED_PARAMETER
            ),
        )

    if reference:
        return MappedType(
            expression=Variable(value=reference_name_to_models_path(reference)),
            kind=TypeKind.RECORD,
        )

    raise TypeMappingError(field, schema)


def map_schema(
    schema: Schema,
    usage: UsageContext = UsageContext.OWNED,
    field: Optional[str] = None,
) -> MappedType:
    """
    Тип для схемы целиком.

    Для массива без собственного $ref ссылка берется из items, чтобы
    сработало правило array + $ref.
    """
    reference = schema.reference

    if (
        reference is None
        and schema.single_instance_type is InstanceType.ARRAY
        and isinstance(schema.array_items, Schema)
    ):
        reference = schema.array_items.reference

    return map_type(
        schema.format,
        schema.instance_type,
        reference,
        usage,
        field=field,
        schema=schema.model_dump(by_alias=True, exclude_defaults=True),
    )


def wrap_optional(mapped: MappedType, required: bool) -> MappedType:
    """Optional[T] для необязательных полей и параметров"""
    if required or mapped.optional:
        return mapped

    return mapped.model_copy(
        update={
            "expression": Variable(value=mapped.expression, wrap_name="Optional"),
            "optional": True,
        }
    )
