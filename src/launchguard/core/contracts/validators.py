"""
Контракты launchguard — JSON Schema (Draft 2020-12)

Схемы лежат в пакете рядом с модулем (schema/*.json):
- guard_config: снапшот конфигурации anti-bot guard
- launch_config: параметры развёртывания экземпляра токена
- permit_request: off-chain запрос permit (owner, spender, value, deadline, signature)

Каждая схема проходит meta-validation один раз при первой загрузке.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from jsonschema import Draft202012Validator, SchemaError, ValidationError


SCHEMA_DIR = Path(__file__).parent / "schema"

GUARD_CONFIG = "guard_config"
LAUNCH_CONFIG = "launch_config"
PERMIT_REQUEST = "permit_request"


class SchemaLoader:
    """Чтение и кэширование схем из каталога."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            ValueError: файл не является корректной Draft 2020-12 схемой
        """
        cached = self._cache.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"{path.name} is not a valid Draft 2020-12 schema: {e.message}") from e

        self._cache[schema_name] = schema
        return schema


_loader: Optional[SchemaLoader] = None


def _default_loader() -> SchemaLoader:
    global _loader
    if _loader is None:
        _loader = SchemaLoader()
    return _loader


class ContractValidator:
    """Валидатор одного контракта, привязанный к схеме по имени."""

    schema_name: str = ""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        self.schema = (loader or _default_loader()).load_schema(self.schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое (наиболее релевантное) нарушение
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self._validator.iter_errors(data)

    def error_messages(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения в виде "path: message", отсортированные по пути."""
        errors = sorted(self.iter_errors(data), key=lambda e: list(e.absolute_path))
        return [
            f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        ]


class GuardConfigValidator(ContractValidator):
    schema_name = GUARD_CONFIG


class LaunchConfigValidator(ContractValidator):
    schema_name = LAUNCH_CONFIG


class PermitRequestValidator(ContractValidator):
    schema_name = PERMIT_REQUEST


def validate_guard_config(data: Dict[str, Any]) -> None:
    GuardConfigValidator().validate(data)


def validate_launch_config(data: Dict[str, Any]) -> None:
    """Проверка сырого JSON параметров развёртывания (до построения LaunchConfig)."""
    LaunchConfigValidator().validate(data)


def validate_permit_request(data: Dict[str, Any]) -> None:
    PermitRequestValidator().validate(data)
