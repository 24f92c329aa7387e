import logging
from typing import Any, Dict

from pydantic import ValidationError

from ...exceptions import DocumentLoadError
from ..types.document import IGNORED_METHODS, Document, Schema

logger = logging.getLogger(__name__)


class OpenApiParser:
    """Парсер OpenAPI спецификации в модель документа"""

    def __init__(self, openapi_dict: Dict[str, Any], source_url: str = None):
        self.openapi_dict = openapi_dict
        self.source_url = source_url

    def parse(self) -> Document:
        """Разбор словаря спецификации в Document"""
        try:
            document = Document.model_validate(self.openapi_dict)
        except ValidationError as e:
            raise DocumentLoadError(self.source_url or "<dict>", str(e)) from e

        for name, schema in document.components.schemas.items():
            self._check_required(name, schema)

        for path, path_item in document.paths.items():
            for method in IGNORED_METHODS:
                if getattr(path_item, method) is not None:
                    logger.debug("%s %s is not generated", method.upper(), path)

        return document

    def _check_required(self, name: str, schema: Schema):
        """required должен быть подмножеством объявленных свойств"""
        for property_name, property_schema in (schema.properties or {}).items():
            if isinstance(property_schema, Schema):
                self._check_required(f"{name}.{property_name}", property_schema)

        if not schema.required:
            return

        declared = schema.properties or {}
        undeclared = [field for field in schema.required if field not in declared]

        if undeclared:
            logger.warning(
                "%s: required fields %s are not declared in properties, ignoring",
                name,
                undeclared,
            )
            schema.required = [field for field in schema.required if field in declared]
