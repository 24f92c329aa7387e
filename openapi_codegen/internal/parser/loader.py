"""
Загрузка OpenAPI спецификации из файла (YAML/JSON) или по URL
"""

import json
import os
from typing import Any, Dict

import httpx
import yaml

from ...exceptions import DocumentLoadError

YAML_EXTENSIONS = (".yml", ".yaml")
JSON_EXTENSIONS = (".json",)


def load_spec(source: str) -> Dict[str, Any]:
    """Загрузка спецификации как словаря"""
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)

    return _load_from_file(source)


def _load_from_url(url: str) -> Dict[str, Any]:
    try:
        response = httpx.get(url, follow_redirects=True, timeout=30)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise DocumentLoadError(url, str(e)) from e

    content_type = response.headers.get("content-type", "")
    if "json" in content_type or url.endswith(JSON_EXTENSIONS):
        return _parse_json(response.text, url)

    return _parse_yaml(response.text, url)


def _load_from_file(path: str) -> Dict[str, Any]:
    if not os.path.isfile(path):
        raise DocumentLoadError(path, "Open API file not found")

    extension = os.path.splitext(path)[1].lower()
    if extension not in YAML_EXTENSIONS + JSON_EXTENSIONS:
        raise DocumentLoadError(
            path, "Input needs to be a YAML or JSON file (.yml, .yaml or .json)"
        )

    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    if extension in JSON_EXTENSIONS:
        return _parse_json(content, path)

    return _parse_yaml(content, path)


def _parse_json(content: str, source: str) -> Dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(source, f"Failed to parse OpenAPI document: {e}") from e

    return _check_mapping(data, source)


def _parse_yaml(content: str, source: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise DocumentLoadError(source, f"Failed to parse OpenAPI document: {e}") from e

    return _check_mapping(data, source)


def _check_mapping(data: Any, source: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DocumentLoadError(source, "document root must be a mapping")
    return data
