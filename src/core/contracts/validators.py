"""
JSON Schema Contract Validators

Валидация наблюдаемого состояния калькулятора (CalculationState.snapshot())
и записей истории против JSON Schema контрактов.

Схемы поставляются как package data (src/core/contracts/schema/*.json)
и читаются через importlib.resources, поэтому работают и из wheel.
"""

import json
from functools import lru_cache
from importlib.resources import files
from importlib.resources.abc import Traversable
from typing import Any, Dict, Iterator, List

import jsonschema
from jsonschema import Draft202012Validator

SNAPSHOT_SCHEMA = "calculator_snapshot"
HISTORY_ENTRY_SCHEMA = "history_entry"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema из ресурсов пакета.

    Каждая схема читается один раз и проходит meta-validation (Draft 2020-12).
    """

    def __init__(self, root: Traversable | None = None):
        """
        Args:
            root: Каталог со схемами (default: schema/ рядом с этим модулем)
        """
        self._root = root if root is not None else files(__package__) / "schema"
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def available_schemas(self) -> List[str]:
        """Имена всех схем (без расширения .json)."""
        return sorted(
            entry.name[: -len(".json")]
            for entry in self._root.iterdir()
            if entry.name.endswith(".json")
        )

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка схемы по имени.

        Raises:
            FileNotFoundError: Схемы с таким именем нет
            ValueError: Файл не является валидной JSON Schema
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        resource = self._root / f"{schema_name}.json"
        if not resource.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_name}.json")

        schema = json.loads(resource.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


@lru_cache(maxsize=None)
def default_loader() -> SchemaLoader:
    """Общий загрузчик для валидаторов пакета."""
    return SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор данных против одной схемы контракта."""

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or default_loader()).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое найденное нарушение
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self.validator.iter_errors(data)

    def error_messages(self, data: Dict[str, Any]) -> List[str]:
        """
        Все нарушения в виде 'path: message', упорядоченные по пути.

        Нарушение на корневом объекте (например, отсутствует required поле)
        имеет путь '<root>'.
        """
        messages = []
        for error in sorted(self.iter_errors(data), key=lambda e: list(map(str, e.path))):
            path = ".".join(str(part) for part in error.path) or "<root>"
            messages.append(f"{path}: {error.message}")
        return messages


class SnapshotValidator(ContractValidator):
    """Валидатор для calculator_snapshot контракта."""

    def __init__(self, loader: SchemaLoader | None = None):
        super().__init__(SNAPSHOT_SCHEMA, loader)


class HistoryEntryValidator(ContractValidator):
    """Валидатор для history_entry контракта."""

    def __init__(self, loader: SchemaLoader | None = None):
        super().__init__(HISTORY_ENTRY_SCHEMA, loader)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


@lru_cache(maxsize=None)
def _snapshot_validator() -> SnapshotValidator:
    return SnapshotValidator()


@lru_cache(maxsize=None)
def _history_entry_validator() -> HistoryEntryValidator:
    return HistoryEntryValidator()


def validate_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация CalculationState.snapshot().

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
    """
    _snapshot_validator().validate(data)


def validate_history_entry(data: Dict[str, Any]) -> None:
    """
    Валидация HistoryEntry.model_dump(mode="json").

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
    """
    _history_entry_validator().validate(data)
