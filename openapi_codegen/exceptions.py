"""
Иерархия исключений генератора

Все фатальные ошибки наследуются от GenerationError и прерывают генерацию
целиком. CLI перехватывает GenerationError и завершает процесс с кодом 1.

    GenerationError
    +-- DocumentLoadError
    +-- ConfigError
    +-- MissingOperationIdError
    +-- DuplicateOperationError
    +-- InvalidReferenceError
    +-- UnresolvedReferenceError
    +-- ReferenceCycleError
    +-- TaxonomyMismatchError
    +-- TypeMappingError
    +-- UnsupportedSchemaError
    +-- UnsupportedMediaTypeError
    +-- ServerConfigError
"""

from typing import Any, Iterable, Optional


class GenerationError(Exception):
    """Базовая ошибка генерации клиента"""


class DocumentLoadError(GenerationError):
    """Не удалось загрузить или разобрать OpenAPI документ"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Не удалось загрузить спецификацию из {source}: {reason}")


class ConfigError(GenerationError):
    """Некорректная конфигурация генератора"""


class MissingOperationIdError(GenerationError):
    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f'"{method} {path}" does not have operationId')


class DuplicateOperationError(GenerationError):
    def __init__(self, operation_id: str, method: str, path: str):
        self.operation_id = operation_id
        self.method = method
        self.path = path
        super().__init__(
            f'operationId "{operation_id}" of "{method} {path}" is already used'
        )


class InvalidReferenceError(GenerationError):
    """Ссылка не содержит категорию или имя компонента"""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        super().__init__(f'{reason} in "{reference}"')


class UnresolvedReferenceError(GenerationError):
    def __init__(self, reference: str, location: Optional[str] = None):
        self.reference = reference
        self.location = location
        message = f'reference "{reference}" does not point to an existing component'
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class ReferenceCycleError(GenerationError):
    def __init__(self, chain: Iterable[str]):
        self.chain = list(chain)
        super().__init__("cyclic reference: " + " -> ".join(self.chain))


class TaxonomyMismatchError(GenerationError):
    """Разрешенная сущность не совпадает с запрошенной категорией"""

    def __init__(self, expected: Any, actual: Any, location: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.location = location
        message = f"resolved to unexpected type {actual}, expected `{expected}`"
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class TypeMappingError(GenerationError):
    def __init__(self, field: Optional[str], schema: Any):
        self.field = field
        self.schema = schema
        super().__init__(
            f"Failed to map type for {field or 'anonymous schema'}. "
            f"Unsupported instance_type and reference is None. Schema: {schema!r}"
        )


class UnsupportedSchemaError(GenerationError):
    def __init__(self, message: str, location: Optional[str] = None):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class UnsupportedMediaTypeError(GenerationError):
    def __init__(self, location: str, media_types: Iterable[str]):
        self.location = location
        self.media_types = list(media_types)
        super().__init__(
            f"{location}: unknown media type(s) {self.media_types}, "
            "expected json, form data or octet stream"
        )


class ServerConfigError(GenerationError):
    def __init__(self, server: Any):
        self.server = server
        super().__init__(f"Server {server!r} does not have `description`")
