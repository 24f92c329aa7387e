"""pyproject.toml сгенерированного пакета"""

from typing import Any, Dict, Optional

import toml

from ..types.models import CodeBlock, CodeFile, Project

DEFAULT_VERSION = "0.1.0"

DEPENDENCIES = [
    "httpx>=0.24.0",
    "pydantic>=2.5.0",
]


def build_manifest(
    package_name: str,
    version: Optional[str] = None,
    description: Optional[str] = None,
    license: Optional[str] = None,
    readme: Optional[str] = None,
    documentation: Optional[str] = None,
    repository: Optional[str] = None,
) -> Dict[str, Any]:
    """Содержимое pyproject.toml; пустые значения не попадают в файл"""
    project: Dict[str, Any] = {
        "name": package_name.replace("_", "-"),
        "version": version or DEFAULT_VERSION,
    }

    if description:
        project["description"] = description
    if license:
        project["license"] = {"text": license}
    if readme:
        project["readme"] = readme

    project["requires-python"] = ">=3.10"
    project["dependencies"] = list(DEPENDENCIES)

    urls = {}
    if documentation:
        urls["Documentation"] = documentation
    if repository:
        urls["Repository"] = repository
    if urls:
        project["urls"] = urls

    return {
        "build-system": {
            "requires": ["setuptools>=61.0"],
            "build-backend": "setuptools.build_meta",
        },
        "project": project,
        "tool": {
            "setuptools": {
                "packages": [package_name, f"{package_name}.models"],
            }
        },
    }


def generate_manifest(project: Project, package_name: str, **options) -> CodeFile:
    manifest_file = project.add_file("pyproject.toml")
    manifest_file.add_code_block(
        CodeBlock(code=toml.dumps(build_manifest(package_name, **options)))
    )
    return manifest_file
