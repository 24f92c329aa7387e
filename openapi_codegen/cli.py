import argparse
import logging
import os
import shutil
import sys
from typing import List, Optional

from openapi_codegen.config import OpenApiConfig
from openapi_codegen.exceptions import ConfigError, GenerationError
from openapi_codegen.generator import ApiClientGenerator
from openapi_codegen.internal.parser.loader import load_spec
from openapi_codegen.internal.types.models import Project
from openapi_codegen.internal.utils.naming import escape_identifier

DEFAULT_DIRNAME = "api_client"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openapi-codegen",
        description="Генерация Python клиента из OpenAPI",
    )
    parser.add_argument(
        "file", nargs="?", help="Путь или URL к OpenAPI спецификации (YAML/JSON)"
    )
    parser.add_argument("-o", "--output", help="Директория для генерации клиента")
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Удалить существующую директорию перед генерацией",
    )
    parser.add_argument("--package-name", help="Имя Python пакета клиента")
    parser.add_argument("--package-version", help="Версия пакета (по умолчанию 0.1.0)")
    parser.add_argument("--license", help="Лицензия пакета")
    parser.add_argument("--description", help="Описание пакета")
    parser.add_argument("--readme", help="README файл пакета")
    parser.add_argument("--documentation", help="Ссылка на документацию")
    parser.add_argument("--repository", help="Ссылка на репозиторий")
    parser.add_argument(
        "--models",
        action="append",
        help="Модуль с дополнительными моделями (можно указать несколько раз)",
    )
    parser.add_argument(
        "--init-config", action="store_true", help="Создать конфиг файл openapi.toml"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Подробный вывод (DEBUG)"
    )
    return parser


def _generate_client_core(config: OpenApiConfig) -> Project:
    """Ядро генерации клиента - только генерация без сохранения"""
    print(f"🚀 Генерация клиента из {config.url}")

    print("📥 Загрузка OpenAPI спецификации...")
    openapi_spec = load_spec(config.url)

    print("⚙️ Генерация кода...")
    generator = ApiClientGenerator(
        openapi_spec,
        source_url=config.url,
        package_name=config.package_name,
        extra_models=config.models,
        manifest=config.manifest_options(),
    )
    return generator.generate()


def _prepare_output(target_path: str, force: bool):
    """Директория вывода должна быть новой, --force удаляет старую"""
    if os.path.exists(target_path):
        if not force:
            raise ConfigError(
                f"Директория {target_path} уже существует, используйте --force"
            )
        print(f"🗑️ Удаление {target_path}")
        shutil.rmtree(target_path)

    os.makedirs(target_path)


def _save_project_files(project: Project, target_path: str):
    """Сохранение файлов проекта"""
    print(f"💾 Сохранение {len(project.files)} файлов...")

    for code_model in project.files:
        path = os.path.join(target_path, code_model.file_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(str(code_model))

    print("✅ Генерация завершена успешно!")
    print(f"📦 Клиент создан в: {os.path.abspath(target_path)}")


def _resolve_config(args) -> OpenApiConfig:
    file_config = OpenApiConfig.from_file() or OpenApiConfig()
    config = file_config.merge_with_args(args)

    if not config.dirname:
        config.dirname = DEFAULT_DIRNAME
    if not config.package_name:
        config.package_name = escape_identifier(
            os.path.basename(os.path.normpath(config.dirname))
        )

    return config


def generate(argv: Optional[List[str]] = None):
    """Универсальная команда генерации OpenAPI клиента"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _resolve_config(args)

        if args.init_config:
            config.save_to_file()
            print("✅ Создан конфиг файл openapi.toml")
            return

        if not config.url:
            print("❌ Ошибка: Укажите файл спецификации или создайте конфиг с --init-config")
            sys.exit(1)

        project = _generate_client_core(config)
        _prepare_output(config.dirname, args.force)
        _save_project_files(project, config.dirname)

    except (GenerationError, OSError) as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)


if __name__ == "__main__":
    generate()
