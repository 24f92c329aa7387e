"""
Тесты командной строки
"""

import json
import os

import pytest
import toml

from openapi_codegen import cli
from openapi_codegen.config import OpenApiConfig

SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Pets", "version": "1.0.0", "description": "Pet store"},
    "servers": [{"url": "https://pets.example.com", "description": "Production servers"}],
    "paths": {
        "/pets/{petId}": {
            "get": {
                "operationId": "getPet",
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}}
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"}
                            }
                        },
                    }
                },
            }
        }
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "properties": {"id": {"type": "string"}},
                "required": ["id"],
            }
        }
    },
}


@pytest.fixture
def spec_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(SPEC), encoding="utf-8")
    return path


class TestCli:
    """Тесты команды openapi-codegen"""

    def test_generate(self, spec_file, tmp_path, capsys):
        cli.generate([str(spec_file), "-o", "pets_client", "--package-version", "1.0.0"])

        output = tmp_path / "pets_client"
        assert (output / "pyproject.toml").exists()
        for name in ("__init__.py", "routes.py", "clients.py", "builder.py", "primitives.py"):
            assert (output / "pets_client" / name).exists()
        assert (output / "pets_client" / "models" / "pet.py").exists()

        manifest = toml.loads((output / "pyproject.toml").read_text(encoding="utf-8"))
        assert manifest["project"]["name"] == "pets-client"
        assert manifest["project"]["version"] == "1.0.0"
        assert manifest["project"]["description"] == "Pet store"

        assert "✅ Генерация завершена успешно!" in capsys.readouterr().out

    def test_package_name(self, spec_file, tmp_path):
        cli.generate([str(spec_file), "-o", "out", "--package-name", "petstore"])

        assert (tmp_path / "out" / "petstore" / "routes.py").exists()

    def test_existing_directory_requires_force(self, spec_file, tmp_path, capsys):
        (tmp_path / "pets_client").mkdir()

        with pytest.raises(SystemExit) as exc_info:
            cli.generate([str(spec_file), "-o", "pets_client"])

        assert exc_info.value.code == 1
        assert "❌ Ошибка генерации" in capsys.readouterr().out

    def test_force_overwrites(self, spec_file, tmp_path):
        stale = tmp_path / "pets_client" / "stale.py"
        stale.parent.mkdir()
        stale.write_text("", encoding="utf-8")

        cli.generate([str(spec_file), "-o", "pets_client", "--force"])

        assert not stale.exists()
        assert (tmp_path / "pets_client" / "pyproject.toml").exists()

    def test_generation_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        broken = dict(SPEC, paths={"/pets": {"get": {"responses": {}}}})
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(broken), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            cli.generate([str(path), "-o", "out"])

        assert exc_info.value.code == 1
        assert "does not have operationId" in capsys.readouterr().out
        assert not os.path.exists(tmp_path / "out")

    def test_missing_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit):
            cli.generate([str(tmp_path / "missing.yaml")])

        assert "Open API file not found" in capsys.readouterr().out

    def test_no_input(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit):
            cli.generate([])

        assert "❌" in capsys.readouterr().out

    def test_init_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        cli.generate(["spec.yaml", "-o", "client", "--init-config", "--models", "a.models", "--models", "b.models"])

        config = OpenApiConfig.from_file()
        assert config.url == "spec.yaml"
        assert config.dirname == "client"
        assert config.package_name == "client"
        assert config.models == ["a.models", "b.models"]

    def test_config_file_used(self, spec_file, tmp_path):
        OpenApiConfig(url=str(spec_file), dirname="from_config").save_to_file()

        cli.generate([])

        assert (tmp_path / "from_config" / "from_config" / "routes.py").exists()

    def test_arguments_override_config(self, spec_file, tmp_path):
        OpenApiConfig(url=str(spec_file), dirname="from_config").save_to_file()

        cli.generate(["-o", "from_args"])

        assert (tmp_path / "from_args" / "from_args" / "routes.py").exists()
        assert not (tmp_path / "from_config").exists()
