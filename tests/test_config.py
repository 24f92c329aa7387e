"""
Тесты для системы конфигурации
"""

import argparse
import os
import tempfile

import pytest

from openapi_codegen.config import OpenApiConfig
from openapi_codegen.exceptions import ConfigError


class TestOpenApiConfig:
    """Тесты конфигурации OpenAPI"""

    def test_config_creation(self):
        """Тест создания конфигурации"""
        config = OpenApiConfig(url="openapi.yaml", dirname="test_client")

        assert config.url == "openapi.yaml"
        assert config.dirname == "test_client"
        assert config.models == []

    def test_config_save_and_load(self):
        """Тест сохранения и загрузки конфигурации"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, "test_openapi.toml")

            original_config = OpenApiConfig(
                url="http://api.example.com/openapi.json",
                dirname="example_client",
                package_name="example",
                version="1.2.3",
                license="MIT",
                models=["shared.models"],
            )
            original_config.save_to_file(config_path)

            loaded_config = OpenApiConfig.from_file(config_path)

            assert loaded_config == original_config

    def test_empty_values_not_saved(self, tmp_path):
        config_path = tmp_path / "openapi.toml"
        OpenApiConfig(url="openapi.yaml").save_to_file(str(config_path))

        assert config_path.read_text(encoding="utf-8").strip() == 'url = "openapi.yaml"'

    def test_config_file_not_exists(self):
        """Тест загрузки несуществующего конфига"""
        config = OpenApiConfig.from_file("nonexistent.toml")
        assert config is None

    def test_search_dir(self, tmp_path):
        OpenApiConfig(url="spec.yml").save_to_file(str(tmp_path / "openapi.toml"))

        config = OpenApiConfig.from_file(search_dir=str(tmp_path))
        assert config.url == "spec.yml"

    def test_invalid_toml(self, tmp_path):
        config_path = tmp_path / "openapi.toml"
        config_path.write_text("url = ", encoding="utf-8")

        with pytest.raises(ConfigError):
            OpenApiConfig.from_file(str(config_path))

    def test_unknown_keys(self, tmp_path):
        config_path = tmp_path / "openapi.toml"
        config_path.write_text('url = "a.yml"\nworkspace = true\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="workspace"):
            OpenApiConfig.from_file(str(config_path))

    def test_models_must_be_list(self, tmp_path):
        config_path = tmp_path / "openapi.toml"
        config_path.write_text('models = "shared.models"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="models"):
            OpenApiConfig.from_file(str(config_path))

    def test_config_merge_with_args(self):
        """Тест объединения конфига с аргументами"""
        config = OpenApiConfig(
            url="http://localhost:8000/openapi.json",
            dirname="original_client",
            license="MIT",
        )
        args = argparse.Namespace(
            file="new.yaml",
            output=None,
            package_version="2.0.0",
            models=["extra.models"],
        )

        merged = config.merge_with_args(args)

        assert merged.url == "new.yaml"  # Переписан из args
        assert merged.dirname == "original_client"  # Остался из config
        assert merged.version == "2.0.0"
        assert merged.license == "MIT"
        assert merged.models == ["extra.models"]
        assert config.url == "http://localhost:8000/openapi.json"

    def test_manifest_options(self):
        config = OpenApiConfig(version="1.0.0", repository="https://git.example.com")

        assert config.manifest_options() == {
            "version": "1.0.0",
            "repository": "https://git.example.com",
        }

    def test_default_values(self):
        """Тест значений по умолчанию"""
        config = OpenApiConfig()

        assert config.url is None
        assert config.dirname is None
        assert config.package_name is None
