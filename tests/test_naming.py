"""
Тесты для утилит именования
"""

from openapi_codegen.internal.utils import (
    escape_identifier,
    is_reserved,
    pascal_case,
    snake_case,
)


class TestSnakeCase:
    """Тесты snake_case"""

    def test_camel_case(self):
        assert snake_case("getItem") == "get_item"
        assert snake_case("listPets") == "list_pets"

    def test_abbreviations(self):
        """Тест аббревиатур в начале имени"""
        assert snake_case("HTTPValidationError") == "http_validation_error"

    def test_special_characters(self):
        """Тест замены спецсимволов на подчеркивания"""
        assert snake_case("x-request-id") == "x_request_id"
        assert snake_case("user.name") == "user_name"
        assert snake_case("__private__") == "private"


class TestPascalCase:
    """Тесты pascal_case"""

    def test_from_snake(self):
        assert pascal_case("item_list") == "ItemList"

    def test_already_pascal(self):
        assert pascal_case("ItemList") == "ItemList"

    def test_leading_digit(self):
        assert pascal_case("3d_model") == "Model3dModel"

    def test_empty(self):
        assert pascal_case("") == "Model"


class TestEscapeIdentifier:
    """Тесты экранирования имен полей и параметров"""

    def test_keywords(self):
        assert escape_identifier("class") == "class_"
        assert escape_identifier("from") == "from_"

    def test_base_model_attributes(self):
        """Тест имен, перекрывающих атрибуты BaseModel"""
        assert escape_identifier("json") == "json_"
        assert escape_identifier("model_config") == "model_config_"

    def test_extra_reserved(self):
        assert escape_identifier("client", extra={"client"}) == "client_"
        assert escape_identifier("client") == "client"

    def test_leading_digit(self):
        assert escape_identifier("2fa") == "field_2fa"

    def test_regular_names(self):
        assert escape_identifier("userName") == "user_name"
        assert escape_identifier("id") == "id"

    def test_is_reserved(self):
        assert is_reserved("def")
        assert is_reserved("model_dump")
        assert not is_reserved("name")
