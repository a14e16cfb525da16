"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов
- Детекция нарушений constraints (min/max/enum/pattern)
- Интеграция с Pydantic моделями и движком
"""

import json
import random
from datetime import datetime, timezone

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    ContractValidator,
    HistoryEntryValidator,
    SNAPSHOT_SCHEMA,
    SchemaLoader,
    SnapshotValidator,
    validate_history_entry,
    validate_snapshot,
)
from src.core.domain import CalculationState, HistoryEntry, NumberBase
from src.engine import CalculatorEngine, EngineConfig


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_history_entry():
    """Валидная запись истории для тестирования."""
    return {
        "id": "h1",
        "expression": "2 + 3",
        "result": "5",
        "timestamp": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def valid_snapshot(valid_history_entry):
    """Валидный snapshot для тестирования."""
    return {
        "display": "5",
        "expression": "2 + 3 =",
        "memory": None,
        "history": [valid_history_entry],
        "is_radians": True,
        "number_base": "DEC",
        "is_second_function": False,
        "parentheses_count": 0,
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_all_schemas():
    """Проверка загрузки всех схем из ресурсов пакета."""
    loader = SchemaLoader()

    assert loader.available_schemas() == ["calculator_snapshot", "history_entry"]

    snapshot_schema = loader.load_schema(SNAPSHOT_SCHEMA)
    history_schema = loader.load_schema("history_entry")

    # длина истории задаётся EngineConfig.history_limit, не схемой
    assert "maxItems" not in snapshot_schema["properties"]["history"]
    assert set(history_schema["required"]) == {"id", "expression", "result", "timestamp"}


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("calculator_snapshot")
    schema2 = loader.load_schema("calculator_snapshot")

    # Должен вернуть тот же объект (кэш)
    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_custom_root(tmp_path, valid_history_entry):
    """Загрузчик читает схемы из произвольного каталога."""
    schema = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["id"],
    }
    (tmp_path / "entry_id.json").write_text(json.dumps(schema), encoding="utf-8")
    loader = SchemaLoader(root=tmp_path)

    assert loader.available_schemas() == ["entry_id"]
    validator = ContractValidator("entry_id", loader=loader)
    assert validator.is_valid(valid_history_entry)
    assert not validator.is_valid({})


def test_schema_loader_rejects_invalid_schema(tmp_path):
    """Meta-validation: невалидная JSON Schema не загружается."""
    (tmp_path / "broken.json").write_text(json.dumps({"type": 42}), encoding="utf-8")

    with pytest.raises(ValueError):
        SchemaLoader(root=tmp_path).load_schema("broken")


# =============================================================================
# TESTS - SNAPSHOT VALIDATION
# =============================================================================


def test_snapshot_validator_accepts_valid_data(valid_snapshot):
    validator = SnapshotValidator()

    validator.validate(valid_snapshot)
    assert validator.is_valid(valid_snapshot)


def test_snapshot_validate_function(valid_snapshot):
    validate_snapshot(valid_snapshot)


def test_snapshot_rejects_missing_required_field(valid_snapshot):
    del valid_snapshot["display"]

    with pytest.raises(ValidationError) as exc_info:
        validate_snapshot(valid_snapshot)

    assert "display" in str(exc_info.value)


def test_snapshot_rejects_wrong_type(valid_snapshot):
    valid_snapshot["is_radians"] = "yes"

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


def test_snapshot_rejects_unknown_base(valid_snapshot):
    valid_snapshot["number_base"] = "TRI"

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


def test_snapshot_rejects_negative_parentheses_count(valid_snapshot):
    valid_snapshot["parentheses_count"] = -1

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


@pytest.mark.parametrize(
    "display", ["0", "-12.5", "FF", "1e+21", "-2.5e-8", "NaN", "Infinity", "-Infinity", "0."]
)
def test_snapshot_accepts_display_forms(valid_snapshot, display):
    valid_snapshot["display"] = display
    validate_snapshot(valid_snapshot)


@pytest.mark.parametrize("display", ["", "ff", "1,5", "--1", "nan"])
def test_snapshot_rejects_malformed_display(valid_snapshot, display):
    valid_snapshot["display"] = display

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


def test_snapshot_rejects_malformed_history_entry(valid_snapshot, valid_history_entry):
    del valid_history_entry["id"]

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


def test_snapshot_with_configured_history_limit_is_valid():
    """История длиннее 50 записей допустима при history_limit > 50."""
    engine = CalculatorEngine(config=EngineConfig(history_limit=60))
    state = engine.initial_state()
    for _ in range(60):
        state = engine.input_digit(state, "1")
        state = engine.perform_operation(state, "+")
        state = engine.input_digit(state, "1")
        state = engine.perform_equals(state)

    assert len(state.history) == 60
    validate_snapshot(state.snapshot())


def test_error_messages_carry_paths(valid_snapshot):
    valid_snapshot["parentheses_count"] = -1
    valid_snapshot["number_base"] = "TRI"
    del valid_snapshot["display"]

    messages = SnapshotValidator().error_messages(valid_snapshot)

    assert len(messages) == 3
    assert messages[0].startswith("<root>: 'display'")
    assert messages[1].startswith("number_base: ")
    assert messages[2].startswith("parentheses_count: ")


def test_snapshot_rejects_additional_properties(valid_snapshot):
    valid_snapshot["operand_ready"] = True

    with pytest.raises(ValidationError):
        validate_snapshot(valid_snapshot)


def test_snapshot_accepts_numeric_memory(valid_snapshot):
    valid_snapshot["memory"] = 42.5
    validate_snapshot(valid_snapshot)


# =============================================================================
# TESTS - HISTORY ENTRY VALIDATION
# =============================================================================


def test_history_entry_validator_accepts_valid_data(valid_history_entry):
    assert HistoryEntryValidator().is_valid(valid_history_entry)
    validate_history_entry(valid_history_entry)


def test_history_entry_rejects_empty_result(valid_history_entry):
    valid_history_entry["result"] = ""

    with pytest.raises(ValidationError):
        validate_history_entry(valid_history_entry)


def test_history_entry_rejects_missing_timestamp(valid_history_entry):
    del valid_history_entry["timestamp"]

    errors = list(HistoryEntryValidator().iter_errors(valid_history_entry))
    assert len(errors) == 1


# =============================================================================
# TESTS - PYDANTIC MODEL INTEGRATION
# =============================================================================


def test_initial_state_snapshot_is_valid():
    validate_snapshot(CalculationState().snapshot())


def test_history_entry_model_dump_is_valid():
    entry = HistoryEntry(
        id="h7",
        expression="nCr(5, 2)",
        result="10",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    validate_history_entry(entry.model_dump(mode="json"))


def test_engine_session_snapshots_are_valid():
    """Каждый промежуточный snapshot сессии соответствует контракту."""
    engine = CalculatorEngine(rng=random.Random(0))
    state = engine.initial_state()

    steps = [
        lambda s: engine.input_digit(s, "9"),
        lambda s: engine.perform_operation(s, "÷"),
        lambda s: engine.input_digit(s, "0"),
        engine.perform_equals,
        engine.clear_all,
        lambda s: engine.insert_constant(s, "π"),
        engine.memory_store,
        lambda s: engine.perform_operation(s, "×"),
        engine.input_open_paren,
        lambda s: engine.input_digit(s, "2"),
        engine.input_close_paren,
        engine.perform_equals,
        lambda s: engine.set_number_base(s, NumberBase.HEX),
        lambda s: engine.perform_scientific(s, "rand"),
    ]
    for step in steps:
        state = step(state)
        validate_snapshot(state.snapshot())
