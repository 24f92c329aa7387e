"""
Тесты для генератора OpenAPI клиентов
"""

import ast
import logging

import pytest
import toml

from openapi_codegen import ApiClientGenerator, generate_client
from openapi_codegen.exceptions import ServerConfigError
from openapi_codegen.internal.generator.manifest import build_manifest
from openapi_codegen.internal.generator.scaffold_generator import ScaffoldGenerator
from openapi_codegen.internal.parser.openapi import OpenApiParser
from openapi_codegen.internal.types.models import Project


def make_spec(**overrides):
    spec = {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "servers": [
            {"url": "https://api.example.com", "description": "Production servers"}
        ],
        "paths": {
            "/users/{userId}": {
                "get": {
                    "operationId": "getUser",
                    "parameters": [
                        {
                            "name": "userId",
                            "in": "path",
                            "required": True,
                            "schema": {"type": "string"},
                        }
                    ],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        }
                    },
                }
            }
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "properties": {"name": {"type": "string"}},
                }
            }
        },
    }
    spec.update(overrides)
    return spec


def scaffold(servers, routes=()):
    document = OpenApiParser({"servers": servers}).parse()
    project = Project(name="test")
    clients = ScaffoldGenerator(document, project, "pkg").generate(routes)
    return project, clients


class TestOpenApiClientGenerator:
    """Тесты основной функциональности генератора"""

    def test_project_files(self):
        """Все файлы пакета создаются"""
        project = ApiClientGenerator(make_spec(), package_name="users_api").generate()

        file_names = {code_file.file_name for code_file in project.files}
        assert file_names == {
            "pyproject.toml",
            "users_api/__init__.py",
            "users_api/routes.py",
            "users_api/clients.py",
            "users_api/builder.py",
            "users_api/primitives.py",
            "users_api/models/__init__.py",
            "users_api/models/user.py",
        }

    def test_generated_code_is_valid(self):
        project = generate_client(make_spec(), package_name="users_api")

        for code_file in project.files:
            if code_file.file_name.endswith(".py"):
                ast.parse(str(code_file), filename=code_file.file_name)

    def test_package_init_exports(self):
        project = generate_client(make_spec(), package_name="users_api")
        source = str(project.get_file("users_api/__init__.py"))

        assert "from . import models" in source
        assert "from .builder import ApiClientBuilder" in source
        assert "from .routes import get_user" in source
        assert "production_client" in source

        tree = ast.parse(source)
        exported = next(
            ast.literal_eval(node.value)
            for node in tree.body
            if isinstance(node, ast.Assign) and node.targets[0].id == "__all__"
        )
        assert exported == [
            "models",
            "ApiClient",
            "ApiClientBuilder",
            "RequestBuilder",
            "default_config",
            "production_client",
            "get_user",
        ]

    def test_user_agent(self):
        project = generate_client(make_spec(), package_name="users_api")
        source = str(project.get_file("users_api/clients.py"))

        assert 'DEFAULT_USER_AGENT = "users_api Python API client"' in source

    def test_without_servers_and_paths(self):
        project = generate_client(
            {"openapi": "3.0.0", "info": {"title": "Empty", "version": "1"}}
        )

        source = str(project.get_file("api_client/__init__.py"))
        assert "from .routes" not in source
        assert str(project.get_file("api_client/routes.py")).count("def ") == 0

    def test_generation_is_deterministic(self):
        first = generate_client(make_spec(), package_name="users_api")
        second = generate_client(make_spec(), package_name="users_api")

        assert [str(f) for f in first.files] == [str(f) for f in second.files]


class TestScaffoldGenerator:
    """Тесты функций создания клиентов по списку servers"""

    def test_server_client(self):
        project, clients = scaffold(
            [{"url": "https://api.example.com/v1", "description": "Production servers"}]
        )
        source = str(project.get_file("pkg/clients.py"))

        assert clients == ["production_client"]
        assert "def production_client() -> ApiClient:" in source
        assert 'url = "https://api.example.com/v1"' in source
        assert "config = default_config(30.0, None, None)" in source
        assert "return ApiClient(config, url)" in source

    def test_server_variables(self):
        project, clients = scaffold(
            [
                {
                    "url": "https://{env}.example.com:{port}/v1",
                    "description": "Staging",
                    "variables": {
                        "env": {"default": "staging", "description": "Environment"},
                        "port": {"default": "443"},
                    },
                }
            ]
        )
        source = str(project.get_file("pkg/clients.py"))

        assert clients == ["staging_client"]
        assert "env: Optional[str] = None," in source
        assert "port: Optional[str] = None," in source
        assert 'if env is None:\n        env = "staging"' in source
        assert 'url = f"https://{env}.example.com:{port}/v1"' in source
        ast.parse(source)

    def test_server_order(self):
        project, clients = scaffold(
            [
                {"url": "https://a.example.com", "description": "Alpha servers"},
                {"url": "https://b.example.com", "description": "Beta servers"},
            ]
        )
        source = str(project.get_file("pkg/clients.py"))

        assert clients == ["alpha_client", "beta_client"]
        assert source.index("class ApiClient") < source.index("def alpha_client")
        assert source.index("def alpha_client") < source.index("def beta_client")

    def test_duplicate_server_names(self, caplog):
        with caplog.at_level(logging.WARNING):
            _, clients = scaffold(
                [
                    {"url": "https://a.example.com", "description": "Main"},
                    {"url": "https://b.example.com", "description": "Main"},
                ]
            )

        assert clients == ["main_client", "main_client_1"]
        assert "defined twice" in caplog.text

    def test_server_without_description(self):
        with pytest.raises(ServerConfigError, match="description"):
            scaffold([{"url": "https://api.example.com"}])

    def test_primitives(self):
        project, _ = scaffold([])
        source = str(project.get_file("pkg/primitives.py"))

        assert "Base64Uuid = " in source
        assert "SecureString = " in source
        ast.parse(source)

    def test_server_client_clashes_with_operation(self, caplog):
        """Имя клиента сервера не перекрывает функцию операции"""
        with caplog.at_level(logging.WARNING):
            project, clients = scaffold(
                [{"url": "https://api.example.com", "description": "Production servers"}],
                routes=["production_client"],
            )
        source = str(project.get_file("pkg/__init__.py"))

        assert clients == ["production_client_1"]
        assert "clashes with an operation" in caplog.text
        assert source.count('"production_client"') == 1


class TestManifest:
    """Тесты pyproject.toml сгенерированного пакета"""

    def test_defaults(self):
        manifest = build_manifest("users_api")

        assert manifest["project"]["name"] == "users-api"
        assert manifest["project"]["version"] == "0.1.0"
        assert "httpx>=0.24.0" in manifest["project"]["dependencies"]
        assert "pydantic>=2.5.0" in manifest["project"]["dependencies"]
        assert "urls" not in manifest["project"]
        assert "license" not in manifest["project"]
        assert manifest["tool"]["setuptools"]["packages"] == [
            "users_api",
            "users_api.models",
        ]

    def test_metadata(self):
        manifest = build_manifest(
            "users_api",
            version="2.1.0",
            license="MIT",
            readme="README.md",
            documentation="https://docs.example.com",
            repository="https://git.example.com/users",
        )

        assert manifest["project"]["version"] == "2.1.0"
        assert manifest["project"]["license"] == {"text": "MIT"}
        assert manifest["project"]["readme"] == "README.md"
        assert manifest["project"]["urls"] == {
            "Documentation": "https://docs.example.com",
            "Repository": "https://git.example.com/users",
        }

    def test_manifest_file(self):
        project = generate_client(
            make_spec(info={"title": "T", "version": "1", "description": "Users API"}),
            package_name="users_api",
            manifest={"version": "3.0.0"},
        )

        manifest = toml.loads(str(project.get_file("pyproject.toml")))
        assert manifest["project"]["version"] == "3.0.0"
        assert manifest["project"]["description"] == "Users API"
        assert manifest["build-system"]["build-backend"] == "setuptools.build_meta"

    def test_description_option_wins(self):
        project = generate_client(
            make_spec(info={"title": "T", "version": "1", "description": "Users API"}),
            package_name="users_api",
            manifest={"description": "Custom"},
        )

        manifest = toml.loads(str(project.get_file("pyproject.toml")))
        assert manifest["project"]["description"] == "Custom"
