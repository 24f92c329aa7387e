"""
Общие файлы сгенерированного пакета: primitives.py, clients.py, builder.py
и корневой __init__.py
"""

import json
import logging
import re
from typing import List, Sequence

from ...exceptions import ServerConfigError
from ..types.document import Document, Server
from ..types.models import CodeBlock, Function, Parameter, Project, Variable
from ..utils.naming import escape_identifier, snake_case
from .templates import templates

logger = logging.getLogger(__name__)

SERVER_VARIABLE = re.compile(r"\{(.*?)\}")

# Таймаут соединения для клиентов, созданных по списку servers
SERVER_CLIENT_TIMEOUT = 30.0


class ScaffoldGenerator:
    """Генерация транспорта и корневого модуля пакета"""

    def __init__(self, document: Document, project: Project, package_dir: str):
        self.document = document
        self.project = project
        self.package_dir = package_dir
        self.server_clients: List[str] = []
        self.routes: List[str] = []

    def generate(self, routes: Sequence[str] = ()) -> List[str]:
        """Создание файлов; возвращает имена функций создания клиентов"""
        package_name = self.package_dir.rsplit("/", 1)[-1]
        self.routes = list(routes)

        self.project.add_file(f"{self.package_dir}/primitives.py").add_code_block(
            CodeBlock(code=templates.primitives)
        )

        clients_file = self.project.add_file(f"{self.package_dir}/clients.py")
        clients_file.add_code_block(
            CodeBlock(
                code=templates.clients.format(
                    user_agent=json.dumps(f"{package_name} Python API client")
                ),
                order=len(self.document.servers) + 1,
            )
        )

        order = len(self.document.servers)
        for server in self.document.servers:
            function = self.server_client(server)
            function.order = order
            order -= 1
            clients_file.add_function(function)
            self.server_clients.append(function.name)

        self.project.add_file(f"{self.package_dir}/builder.py").add_code_block(
            CodeBlock(code=templates.builder.format())
        )

        self._generate_init(routes)
        return self.server_clients

    def server_client(self, server: Server) -> Function:
        """
        Функция создания клиента для сервера.

        Имя берется из description без слова "servers", переменные сервера
        становятся необязательными аргументами со значениями по умолчанию.
        """
        if not server.description:
            raise ServerConfigError(server.model_dump(exclude_defaults=True))

        name = snake_case(server.description.replace("servers", "", 1)) or "server"
        if name[0].isdigit():
            name = f"server_{name}"
        name = f"{name}_client"

        if name in self.server_clients or name in self.routes:
            if name in self.server_clients:
                reason = "is defined twice"
            else:
                reason = "clashes with an operation"
            index = max(len(self.server_clients), 1)
            while f"{name}_{index}" in self.server_clients + self.routes:
                index += 1

            renamed = f"{name}_{index}"
            logger.warning("Server client %s %s, renamed to %s", name, reason, renamed)
            name = renamed

        function = Function(name=name, response="ApiClient", description=server.url)

        identifiers = {}
        code = []

        for variable_name, variable in server.variables.items():
            identifier = escape_identifier(variable_name, extra={"url", "config"})
            identifiers[variable_name] = identifier

            function.parameters.append(
                Parameter(
                    name=identifier,
                    var_type=Variable(value="str", wrap_name="Optional"),
                    default=Variable(value="None"),
                    description=variable.description,
                )
            )
            code.append(
                f"if {identifier} is None:\n\t{identifier} = {json.dumps(variable.default)}"
            )

        code.append(f"url = {self._url_expression(server.url, identifiers)}")
        code.append(f"config = default_config({SERVER_CLIENT_TIMEOUT}, None, None)")
        code.append("return ApiClient(config, url)")

        function.set_code_block("\n".join(code))
        return function

    @staticmethod
    def _url_expression(url: str, identifiers: dict) -> str:
        if not SERVER_VARIABLE.search(url):
            return json.dumps(url)

        template = ""
        for index, part in enumerate(SERVER_VARIABLE.split(url)):
            if index % 2:
                template += "{" + (identifiers.get(part) or escape_identifier(part)) + "}"
            else:
                template += part.replace("{", "{{").replace("}", "}}")

        return f"f{json.dumps(template)}"

    def _generate_init(self, routes: Sequence[str]):
        package_init = self.project.add_file(f"{self.package_dir}/__init__.py")

        exports = ["ApiClient", "ApiClientBuilder", "RequestBuilder", "default_config"]
        exports.extend(self.server_clients)
        exports.extend(routes)

        package_init.imports.extend(
            [
                "# Auto-generated API client",
                "from . import models",
                "from .builder import ApiClientBuilder",
                _import_line(
                    ".clients",
                    ["ApiClient", "RequestBuilder", "default_config"]
                    + self.server_clients,
                ),
            ]
        )
        if routes:
            package_init.imports.append(_import_line(".routes", list(routes)))

        package_init.add_code_block(
            CodeBlock(code=f"__all__ = {json.dumps(['models'] + exports)}")
        )


def _import_line(module: str, names: List[str]) -> str:
    if len(names) <= 3:
        return f"from {module} import {', '.join(names)}"

    return (
        f"from {module} import (\n"
        + "".join(f"    {name},\n" for name in names)
        + ")"
    )
