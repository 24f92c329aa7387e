"""Генератор типизированных Python клиентов из OpenAPI спецификаций"""

from .config import OpenApiConfig
from .exceptions import GenerationError
from .generator import ApiClientGenerator, generate_client

__all__ = ["ApiClientGenerator", "GenerationError", "OpenApiConfig", "generate_client"]
