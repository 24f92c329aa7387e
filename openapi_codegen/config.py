"""
Конфигурация для генерации API клиента
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import toml

from .exceptions import ConfigError

CONFIG_FILE = "openapi.toml"

# Аргумент командной строки -> поле конфигурации
ARGUMENTS = {
    "file": "url",
    "output": "dirname",
    "package_name": "package_name",
    "package_version": "version",
    "license": "license",
    "description": "description",
    "readme": "readme",
    "documentation": "documentation",
    "repository": "repository",
}


@dataclass
class OpenApiConfig:
    """Конфигурация генератора OpenAPI клиента"""

    url: Optional[str] = None
    dirname: Optional[str] = None

    # Метаданные сгенерированного пакета
    package_name: Optional[str] = None
    version: Optional[str] = None
    license: Optional[str] = None
    description: Optional[str] = None
    readme: Optional[str] = None
    documentation: Optional[str] = None
    repository: Optional[str] = None

    # Модули с дополнительными моделями, реэкспортируются в models/__init__.py
    models: List[str] = field(default_factory=list)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE, search_dir: str = None
    ) -> Optional["OpenApiConfig"]:
        """Загрузка конфигурации из файла, None если файла нет"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Некорректный конфиг {config_path}: {e}") from e

        unknown = set(config_data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigError(
                f"Неизвестные параметры в {config_path}: {', '.join(sorted(unknown))}"
            )

        models = config_data.get("models", [])
        if not isinstance(models, list):
            raise ConfigError(f"`models` в {config_path} должен быть списком")

        return cls(**config_data)

    def save_to_file(self, config_path: str = CONFIG_FILE) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            key: value for key, value in asdict(self).items() if value not in (None, [])
        }

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "OpenApiConfig":
        """Объединение с аргументами командной строки, аргументы важнее"""
        values: Dict[str, Any] = asdict(self)

        for argument, config_field in ARGUMENTS.items():
            value = getattr(args, argument, None)
            if value is not None:
                values[config_field] = value

        models = getattr(args, "models", None)
        if models:
            values["models"] = list(models)

        return OpenApiConfig(**values)

    def manifest_options(self) -> Dict[str, Any]:
        """Поля для pyproject.toml сгенерированного пакета"""
        options = {
            "version": self.version,
            "license": self.license,
            "description": self.description,
            "readme": self.readme,
            "documentation": self.documentation,
            "repository": self.repository,
        }
        return {key: value for key, value in options.items() if value is not None}
