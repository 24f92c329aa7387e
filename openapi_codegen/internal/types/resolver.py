"""
Разрешение ссылок `#/components/<category>/<name>` на сущности реестра

Результат разрешения - размеченное значение (ResolvedReference) с явной
категорией сущности. Вызывающий код сверяет категорию и считает несовпадение
фатальной ошибкой.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ...exceptions import (
    InvalidReferenceError,
    ReferenceCycleError,
    TaxonomyMismatchError,
)
from .document import Components, Parameter, Reference, RequestBody, Response, Schema

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    SCHEMA = "Schema"
    PARAMETER = "Parameter"
    RESPONSE = "Response"
    REQUEST_BODY = "RequestBody"


ENTITY_CLASSES = {
    EntityKind.SCHEMA: Schema,
    EntityKind.PARAMETER: Parameter,
    EntityKind.RESPONSE: Response,
    EntityKind.REQUEST_BODY: RequestBody,
}

# Категория в ссылке -> тип сущности
CATEGORIES = {
    "schemas": EntityKind.SCHEMA,
    "parameters": EntityKind.PARAMETER,
    "responses": EntityKind.RESPONSE,
    "requestBodies": EntityKind.REQUEST_BODY,
}


@dataclass(frozen=True)
class ResolveTarget:
    """Что разрешаем: категория + inline сущность, ссылка или None"""

    kind: EntityKind
    handle: Any = None

    @classmethod
    def schema(cls, handle) -> "ResolveTarget":
        return cls(EntityKind.SCHEMA, handle)

    @classmethod
    def parameter(cls, handle) -> "ResolveTarget":
        return cls(EntityKind.PARAMETER, handle)

    @classmethod
    def response(cls, handle) -> "ResolveTarget":
        return cls(EntityKind.RESPONSE, handle)

    @classmethod
    def request_body(cls, handle) -> "ResolveTarget":
        return cls(EntityKind.REQUEST_BODY, handle)


@dataclass(frozen=True)
class ResolvedReference:
    """
    Разрешенная сущность.

    owned=False - объект из реестра (заимствован, менять нельзя),
    owned=True - собственная копия inline определения.
    """

    kind: EntityKind
    entity: Any
    owned: bool = False

    def __str__(self) -> str:
        return f"{self.kind.value}({self.entity!r})"


def pointer_of(handle: Any) -> Optional[str]:
    """Строка ссылки, если handle - указатель, иначе None"""
    if isinstance(handle, Reference):
        return handle.reference
    if isinstance(handle, Schema) and handle.is_pointer:
        return handle.reference
    return None


def parse_reference(reference: str) -> Tuple[str, str]:
    """
    Разбор ссылки на категорию и имя.

    Первые два сегмента (`#` и `components`) пропускаются, в имени
    раскрываются экранирования JSON Pointer (`~1` -> `/`, `~0` -> `~`).

    Examples:
        >>> parse_reference("#/components/schemas/Item")
        ('schemas', 'Item')
    """
    segments = reference.split("/")[2:]

    if not segments or not segments[0]:
        raise InvalidReferenceError(reference, "no component name found")
    if len(segments) < 2 or not segments[1]:
        raise InvalidReferenceError(reference, "no model name found")

    name = segments[1].replace("~1", "/").replace("~0", "~")
    return segments[0], name


def reference_kind(reference: str) -> Optional[EntityKind]:
    """Категория ссылки или None для неизвестной категории"""
    category, _ = parse_reference(reference)
    return CATEGORIES.get(category)


def resolve(
    target: ResolveTarget, components: Components
) -> Optional[ResolvedReference]:
    """
    Разрешение inline сущности или ссылки.

    - None на входе -> None;
    - inline сущность -> ее копия с запрошенной категорией, при несовпадении
      категории - TaxonomyMismatchError;
    - ссылка -> resolve_reference.
    """
    handle = target.handle

    if handle is None:
        return None

    if isinstance(handle, Reference):
        return resolve_reference(handle.reference, components)

    expected = ENTITY_CLASSES[target.kind]
    if not isinstance(handle, expected):
        raise TaxonomyMismatchError(target.kind.value, type(handle).__name__)

    reference = pointer_of(handle)
    if reference is not None:
        return resolve_reference(reference, components)

    return ResolvedReference(target.kind, handle.model_copy(deep=True), owned=True)


def resolve_reference(
    reference: str, components: Components, _chain: Optional[List[str]] = None
) -> Optional[ResolvedReference]:
    """
    Поиск сущности по ссылке в реестре компонентов.

    Неизвестная категория логируется и дает None, известная категория без
    такого имени - тоже None. Если найденная запись сама является ссылкой,
    она разрешается рекурсивно; повтор ссылки в цепочке - ReferenceCycleError.
    """
    chain = list(_chain or [])
    if reference in chain:
        raise ReferenceCycleError(chain + [reference])
    chain.append(reference)

    category, name = parse_reference(reference)
    kind = CATEGORIES.get(category)

    if kind is None:
        logger.warning("Unsupported component type %s", category)
        return None

    entity = _registry(components, kind).get(name)

    if entity is None:
        return None

    nested = pointer_of(entity)
    if nested is not None:
        return resolve_reference(nested, components, chain)

    return ResolvedReference(kind, entity, owned=False)


def _registry(components: Components, kind: EntityKind) -> Dict[str, Any]:
    if kind is EntityKind.SCHEMA:
        return components.schemas
    if kind is EntityKind.PARAMETER:
        return components.parameters
    if kind is EntityKind.RESPONSE:
        return components.responses
    return components.request_bodies
