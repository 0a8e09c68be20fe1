"""
JSON Schema Contract Validators

Проверка JSON-представлений движка (события, снапшоты пулов) против
формальных контрактов в src/core/contracts/schema/ (Draft 2020-12).

- engine_event.json: общий конверт любого события
- swap_event.json: строгая схема свопа (поверх конверта)
- pool_snapshot.json: калибровка + резервы + инвариант пула

Нарушение контракта → jsonschema.ValidationError.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"

# Строгие схемы, применяемые к событию поверх engine_event
_STRICT_EVENT_SCHEMAS: Dict[str, str] = {"SWAP": "swap_event"}


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузка и meta-валидация схем из каталога.

    Args:
        schema_dir: Каталог со схемами (по умолчанию SCHEMA_DIR)

    Raises:
        RuntimeError: если каталог не существует
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def available(self) -> List[str]:
        """Имена схем в каталоге (без расширения)."""
        return sorted(path.stem for path in self.schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени (кэшируется в экземпляре).

        Raises:
            FileNotFoundError: файла схемы нет
            ValueError: схема не проходит meta-validation
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
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        self._cache[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: данные не соответствуют контракту
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self._validator.iter_errors(data)

    def error_messages(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения в виде 'path: message', отсортированные по пути."""
        errors = sorted(self.iter_errors(data), key=lambda e: list(map(str, e.path)))
        return [
            f"{'/'.join(map(str, error.path)) or '<root>'}: {error.message}"
            for error in errors
        ]


class EngineEventValidator(ContractValidator):
    def __init__(self) -> None:
        super().__init__("engine_event")


class SwapEventValidator(ContractValidator):
    def __init__(self) -> None:
        super().__init__("swap_event")


class PoolSnapshotValidator(ContractValidator):
    def __init__(self) -> None:
        super().__init__("pool_snapshot")


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> ContractValidator:
    return ContractValidator(schema_name)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_engine_event(data: Dict[str, Any]) -> None:
    """
    Валидация события: конверт engine_event, затем строгая схема типа
    события, если она есть (SWAP → swap_event).

    Raises:
        ValidationError: событие не соответствует контракту
    """
    _validator("engine_event").validate(data)
    strict = _STRICT_EVENT_SCHEMAS.get(data.get("event_type", ""))
    if strict is not None:
        _validator(strict).validate(data)


def validate_swap_event(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: событие не соответствует swap_event
    """
    _validator("swap_event").validate(data)


def validate_pool_snapshot(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: снапшот не соответствует pool_snapshot
    """
    _validator("pool_snapshot").validate(data)
