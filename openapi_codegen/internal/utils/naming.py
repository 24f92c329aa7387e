"""Утилиты для работы с именами моделей, полей и параметров"""

import keyword
import re
from typing import Iterable

# Атрибуты pydantic.BaseModel, которые нельзя перекрывать полями модели
BASE_MODEL_ATTRIBUTES = frozenset(
    {
        "construct",
        "copy",
        "dict",
        "from_orm",
        "json",
        "model_config",
        "model_computed_fields",
        "model_construct",
        "model_copy",
        "model_dump",
        "model_dump_json",
        "model_extra",
        "model_fields",
        "model_fields_set",
        "model_json_schema",
        "model_post_init",
        "model_rebuild",
        "model_validate",
        "model_validate_json",
        "model_validate_strings",
        "parse_file",
        "parse_obj",
        "parse_raw",
        "schema",
        "schema_json",
        "update_forward_refs",
        "validate",
    }
)


def snake_case(name: str) -> str:
    """
    Преобразование имени в snake_case.

    Examples:
        >>> snake_case("getItem")
        'get_item'
        >>> snake_case("HTTPValidationError")
        'http_validation_error'
        >>> snake_case("x-request-id")
        'x_request_id'
    """
    # Все спецсимволы (дефисы, точки, пробелы, скобки) становятся подчеркиваниями
    name = re.sub(r"[^0-9a-zA-Z_]", "_", name)

    # HTTPValidationError -> HTTP_Validation_Error -> http_validation_error
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1)
    s3 = re.sub("([A-Z]+)([A-Z][a-z])", r"\1_\2", s2)
    s4 = re.sub("_+", "_", s3)
    return s4.strip("_").lower()


def pascal_case(name: str) -> str:
    """
    Преобразование имени в PascalCase (стиль имен классов).

    Examples:
        >>> pascal_case("item_list")
        'ItemList'
        >>> pascal_case("ItemList")
        'ItemList'
        >>> pascal_case("base64uuid")
        'Base64uuid'
    """
    result = "".join(part[:1].upper() + part[1:] for part in snake_case(name).split("_"))

    if not result:
        return "Model"
    if result[0].isdigit():
        return f"Model{result}"
    return result


def is_reserved(name: str, extra: Iterable[str] = ()) -> bool:
    """Проверка, совпадает ли имя с ключевым словом или зарезервированным именем"""
    return keyword.iskeyword(name) or name in BASE_MODEL_ATTRIBUTES or name in extra


def escape_identifier(name: str, extra: Iterable[str] = ()) -> str:
    """
    Имя поля/параметра для Python: snake_case + суффикс `_` для
    зарезервированных слов.

    Examples:
        >>> escape_identifier("class")
        'class_'
        >>> escape_identifier("userName")
        'user_name'
        >>> escape_identifier("2fa")
        'field_2fa'
    """
    identifier = snake_case(name) or "field"

    if identifier[0].isdigit():
        identifier = f"field_{identifier}"

    if is_reserved(identifier, extra):
        identifier += "_"

    return identifier
