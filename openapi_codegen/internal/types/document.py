"""
Модель OpenAPI документа

Только те части спецификации, которые нужны генератору. Порядок ключей во
всех словарях сохраняется и определяет порядок генерируемых моделей и функций.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class InstanceType(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NUMBER = "number"
    STRING = "string"
    INTEGER = "integer"


class DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Reference(DocumentModel):
    """Именованная ссылка вида #/components/<category>/<name>"""

    reference: str = Field(alias="$ref")


class Schema(DocumentModel):
    format: Optional[str] = None
    instance_type: Optional[Union[InstanceType, List[InstanceType]]] = Field(
        default=None, alias="type"
    )
    reference: Optional[str] = Field(default=None, alias="$ref")
    array_items: Optional[
        Union["Schema", bool, List[Union["Schema", bool]]]
    ] = Field(default=None, alias="items")
    properties: Optional[Dict[str, Union["Schema", bool]]] = None
    required: List[str] = []

    title: Optional[str] = None
    description: Optional[str] = None
    enum: Optional[List[Any]] = None

    @property
    def is_pointer(self) -> bool:
        """Схема состоит только из $ref"""
        return self.reference is not None and not self.model_dump(
            exclude={"reference"}, exclude_defaults=True
        )

    @property
    def single_instance_type(self) -> Optional[InstanceType]:
        if isinstance(self.instance_type, InstanceType):
            return self.instance_type
        return None


Schema.model_rebuild()


class MediaType(DocumentModel):
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Parameter(DocumentModel):
    name: str
    location: str = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    deprecated: bool = False

    # Значение параметра: либо схема, либо content (не поддерживается для типов)
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    content: Optional[Dict[str, MediaType]] = None


class RequestBody(DocumentModel):
    content: Dict[str, MediaType]
    description: Optional[str] = None
    required: bool = False


class Response(DocumentModel):
    description: Optional[str] = None
    content: Dict[str, MediaType] = {}


def _ref_or_object(value: Any) -> str:
    if isinstance(value, dict):
        return "ref" if "$ref" in value else "object"
    return "ref" if isinstance(value, Reference) else "object"


ParameterRef = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[Parameter, Tag("object")]],
    Discriminator(_ref_or_object),
]
RequestBodyRef = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[RequestBody, Tag("object")]],
    Discriminator(_ref_or_object),
]
ResponseRef = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[Response, Tag("object")]],
    Discriminator(_ref_or_object),
]


class Operation(DocumentModel):
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []
    deprecated: bool = False

    parameters: List[ParameterRef] = []
    request_body: Optional[RequestBodyRef] = Field(default=None, alias="requestBody")
    responses: Dict[str, ResponseRef] = {}

    @field_validator("responses", mode="before")
    def responses_keys_check(cls, value):
        # YAML разбирает `200:` как число
        if isinstance(value, dict):
            return {str(status): response for status, response in value.items()}
        return value


class PathItem(DocumentModel):
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: List[ParameterRef] = []

    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None

    # Разбираются, но не генерируются
    head: Optional[Operation] = None
    options: Optional[Operation] = None
    trace: Optional[Operation] = None

    def operations(self) -> List[tuple]:
        """Пары (METHOD, operation) в фиксированном порядке генерации"""
        return [
            (method.upper(), getattr(self, method))
            for method in GENERATED_METHODS
            if getattr(self, method) is not None
        ]


GENERATED_METHODS = ("get", "put", "post", "delete", "patch")
IGNORED_METHODS = ("head", "options", "trace")


class Components(DocumentModel):
    schemas: Dict[str, Schema] = {}
    parameters: Dict[str, ParameterRef] = {}
    responses: Dict[str, ResponseRef] = {}
    request_bodies: Dict[str, RequestBodyRef] = Field(
        default={}, alias="requestBodies"
    )


class ServerVariable(DocumentModel):
    default: str
    enum: Optional[List[str]] = None
    description: Optional[str] = None


class Server(DocumentModel):
    url: str
    description: Optional[str] = None
    variables: Dict[str, ServerVariable] = {}


class Info(DocumentModel):
    title: str = "API"
    version: str = "0.1.0"
    description: Optional[str] = None


class Document(DocumentModel):
    openapi: str = "3.0.0"
    info: Info = Field(default_factory=Info)
    servers: List[Server] = []
    paths: Dict[str, PathItem] = {}
    components: Components = Field(default_factory=Components)
