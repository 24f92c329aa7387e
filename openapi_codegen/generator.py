"""
Главный модуль генератора - чистый интерфейс
"""

from typing import Any, Dict, Optional, Sequence

from .internal.generator.client_generator import ClientGenerator
from .internal.parser.openapi import OpenApiParser
from .internal.types.models import Project


class ApiClientGenerator:
    """Чистый интерфейс для генерации API клиентов"""

    def __init__(
        self,
        openapi_spec: Dict[str, Any],
        source_url: str = None,
        package_name: str = "api_client",
        extra_models: Sequence[str] = (),
        manifest: Optional[Dict[str, Any]] = None,
    ):
        self.parser = OpenApiParser(openapi_spec, source_url)
        self.package_name = package_name
        self.extra_models = extra_models
        self.manifest = manifest

    def generate(self) -> Project:
        """Генерация проекта клиента"""
        document = self.parser.parse()
        return ClientGenerator(
            document,
            package_name=self.package_name,
            extra_models=self.extra_models,
            manifest=self.manifest,
        ).generate()


def generate_client(
    openapi_spec: Dict[str, Any], source_url: str = None, **options
) -> Project:
    """Создание API клиента из OpenAPI спецификации"""
    generator = ApiClientGenerator(openapi_spec, source_url, **options)
    return generator.generate()
