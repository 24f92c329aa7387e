import logging
from typing import Any, Dict, Optional, Sequence

from ..types.document import Document
from ..types.models import Project
from .manifest import generate_manifest
from .model_generator import ModelGenerator
from .route_generator import RouteGenerator
from .scaffold_generator import ScaffoldGenerator

logger = logging.getLogger(__name__)


class ClientGenerator:
    """Генератор API клиента из OpenAPI"""

    def __init__(
        self,
        document: Document,
        package_name: str = "api_client",
        extra_models: Sequence[str] = (),
        manifest: Optional[Dict[str, Any]] = None,
    ):
        self.document = document
        self.package_name = package_name
        self.extra_models = list(extra_models)
        self.manifest = dict(manifest or {})
        self.project = Project(name=package_name)

    def generate(self) -> Project:
        """Основная генерация: модели, функции, транспорт и pyproject.toml"""
        models = ModelGenerator(
            self.document.components,
            self.project,
            self.package_name,
            self.extra_models,
        ).generate()
        logger.info("Generated %d models", len(models))

        routes = RouteGenerator(self.document, self.project, self.package_name).generate()
        logger.info("Generated %d routes", len(routes))

        ScaffoldGenerator(self.document, self.project, self.package_name).generate(routes)

        manifest = dict(self.manifest)
        manifest.setdefault("description", self.document.info.description)
        generate_manifest(self.project, self.package_name, **manifest)

        return self.project
