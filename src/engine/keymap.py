"""Keymap — привязка клавиатуры к командам движка.

Хост передаёт значение KeyboardEvent.key, получает новый state и флаги:
- handled: клавиша распознана (даже если команда оказалась no-op)
- prevent_default: хост должен подавить действие по умолчанию ('/' — quick find)
"""

from dataclasses import dataclass
from typing import Callable, Final

from src.core.domain.calculation_state import CalculationState
from src.core.domain.operations import Operator
from src.engine.calculator import CalculatorEngine

Command = Callable[[CalculatorEngine, CalculationState], CalculationState]


@dataclass(frozen=True)
class KeyResult:
    """Результат обработки клавиши."""

    state: CalculationState
    handled: bool
    prevent_default: bool = False


def _operation(op: Operator) -> Command:
    return lambda engine, state: engine.perform_operation(state, op)


KEY_COMMANDS: Final[dict[str, Command]] = {
    ".": CalculatorEngine.input_decimal,
    "+": _operation(Operator.ADD),
    "-": _operation(Operator.SUBTRACT),
    "*": _operation(Operator.MULTIPLY),
    "/": _operation(Operator.DIVIDE),
    "^": _operation(Operator.POWER),
    "%": CalculatorEngine.input_percent,
    "Enter": CalculatorEngine.perform_equals,
    "=": CalculatorEngine.perform_equals,
    "Backspace": CalculatorEngine.backspace,
    "Escape": CalculatorEngine.clear_all,
    "Delete": CalculatorEngine.clear_entry,
    "(": CalculatorEngine.input_open_paren,
    ")": CalculatorEngine.input_close_paren,
}

# Клавиши, для которых хост подавляет действие браузера
PREVENT_DEFAULT_KEYS: Final[frozenset[str]] = frozenset({"/"})

_DIGIT_KEYS: Final[str] = "0123456789abcdefABCDEF"


def dispatch_key(engine: CalculatorEngine, state: CalculationState, key: str) -> KeyResult:
    """Обработка одной клавиши.

    Args:
        engine: движок калькулятора
        state: текущее состояние
        key: значение KeyboardEvent.key

    Returns:
        KeyResult; для неизвестной клавиши state не меняется и handled=False
    """
    if len(key) == 1 and key in _DIGIT_KEYS:
        return KeyResult(state=engine.input_digit(state, key.upper()), handled=True)

    command = KEY_COMMANDS.get(key)
    if command is None:
        return KeyResult(state=state, handled=False)

    return KeyResult(
        state=command(engine, state),
        handled=True,
        prevent_default=key in PREVENT_DEFAULT_KEYS,
    )
