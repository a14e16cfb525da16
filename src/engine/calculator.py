"""CalculatorEngine — командный движок калькулятора.

Каждая команда — чистое преобразование (CalculationState, input) -> CalculationState:
- Невалидный ввод (цифра вне системы счисления, переполнение, ')' на глубине 0,
  неизвестное имя операции) — no-op, возвращается исходный state
- Математически неопределённый результат — NaN/inf в display ("sticky NaN")
- Equals без pending операции — no-op

Вычисление строго слева направо, без приоритетов: 2 + 3 × 4 = 20.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, TypeVar

from src.core.domain.calculation_state import (
    ArithmeticOp,
    CalculationState,
    FunctionOp,
    HistoryEntry,
    ParenFrame,
)
from src.core.domain.operations import (
    Constant,
    NumberBase,
    Operator,
    ScientificFunction,
    TwoArgFunction,
)
from src.core.math.number_base import (
    MAX_INPUT_DIGITS,
    count_digits,
    format_decimal,
    format_for_base,
    get_decimal_value,
    normalize_digit,
    parse_decimal,
)
from src.core.math.scientific import (
    CONSTANTS,
    FACTORIAL_LIMIT,
    evaluate_pending,
    evaluate_two_arg,
    evaluate_unary,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _coerce(enum_cls: type[E], value: "E | str") -> Optional[E]:
    """Приведение имени к Enum; None для неизвестного имени."""
    try:
        return enum_cls(value)
    except ValueError:
        return None


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация движка.

    - max_digits: лимит цифр при вводе числа
    - history_limit: максимальная длина истории (старые записи отбрасываются)
    - factorial_limit: выше этого n факториал возвращает inf
    - default_radians: angle mode нового состояния
    """

    max_digits: int = MAX_INPUT_DIGITS
    history_limit: int = 50
    factorial_limit: int = FACTORIAL_LIMIT
    default_radians: bool = True

    def __post_init__(self) -> None:
        if self.max_digits < 1:
            raise ValueError(f"max_digits must be positive, got {self.max_digits}")
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {self.history_limit}")


# =============================================================================
# ENGINE
# =============================================================================


class CalculatorEngine:
    """Движок калькулятора.

    Не хранит состояния вычисления: только конфигурацию, источник случайных
    чисел (RAND) и часы (timestamp записей истории). State передаётся
    в каждую команду и возвращается новым снапшотом.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            config: конфигурация движка (default EngineConfig())
            rng: источник случайных чисел для RAND
            clock: часы для timestamp истории (default: UTC now)
        """
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()
        self.clock = clock or _utc_now

    def initial_state(self) -> CalculationState:
        """Начальное состояние сессии."""
        return CalculationState(is_radians=self.config.default_radians)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _value(self, state: CalculationState) -> float:
        return get_decimal_value(state.display, state.number_base)

    def _format(self, state: CalculationState, value: float) -> str:
        return format_for_base(value, state.number_base)

    # -------------------------------------------------------------------------
    # Clear
    # -------------------------------------------------------------------------

    def clear_all(self, state: CalculationState) -> CalculationState:
        """AC: сброс всего, кроме memory, history, angle mode и number base."""
        return CalculationState(
            memory=state.memory,
            history=state.history,
            history_sequence=state.history_sequence,
            is_radians=state.is_radians,
            number_base=state.number_base,
        )

    def clear_entry(self, state: CalculationState) -> CalculationState:
        """CE: сброс только текущего ввода."""
        return state.model_copy(
            update={"display": "0", "waiting_for_operand": False, "operand_ready": False}
        )

    # -------------------------------------------------------------------------
    # Digit entry
    # -------------------------------------------------------------------------

    def input_digit(self, state: CalculationState, digit: str) -> CalculationState:
        """Ввод цифры с валидацией для активной системы счисления.

        Args:
            state: текущее состояние
            digit: символ цифры ('0'-'9', 'A'-'F' в любом регистре)

        Returns:
            Новое состояние, либо исходное если цифра недопустима
            или число превысило бы max_digits
        """
        normalized = normalize_digit(digit, state.number_base)
        if normalized is None:
            logger.debug("Rejected digit %r for base %s", digit, state.number_base.value)
            return state

        if state.waiting_for_operand:
            return state.model_copy(
                update={
                    "display": normalized,
                    "waiting_for_operand": False,
                    "operand_ready": False,
                }
            )

        display = normalized if state.display == "0" else state.display + normalized
        if count_digits(display) > self.config.max_digits:
            logger.debug("Rejected digit %r: display would exceed %d digits", digit, self.config.max_digits)
            return state

        return state.model_copy(update={"display": display})

    def input_decimal(self, state: CalculationState) -> CalculationState:
        """Десятичная точка (только в DEC)."""
        if state.number_base != NumberBase.DEC:
            return state

        if state.waiting_for_operand:
            return state.model_copy(
                update={"display": "0.", "waiting_for_operand": False, "operand_ready": False}
            )

        if "." in state.display:
            return state

        return state.model_copy(update={"display": state.display + "."})

    def toggle_sign(self, state: CalculationState) -> CalculationState:
        """Смена знака: добавляет или убирает ведущий '-'."""
        if state.display.startswith("-"):
            display = state.display[1:]
        else:
            display = "-" + state.display
        return state.model_copy(update={"display": display})

    def input_percent(self, state: CalculationState) -> CalculationState:
        """Процент: display / 100, всегда в десятичной интерпретации."""
        value = parse_decimal(state.display)
        if math.isnan(value):
            return state

        return state.model_copy(
            update={
                "display": format_decimal(value / 100),
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    def backspace(self, state: CalculationState) -> CalculationState:
        """Удаление последнего символа; пустой display (или одинокий '-') становится '0'."""
        if state.waiting_for_operand:
            return state

        display = state.display[:-1]
        if display in ("", "-"):
            display = "0"
        return state.model_copy(update={"display": display})

    # -------------------------------------------------------------------------
    # Binary operators
    # -------------------------------------------------------------------------

    def perform_operation(self, state: CalculationState, op: "Operator | str") -> CalculationState:
        """Нажатие бинарного оператора.

        1. Нет pending операции — display становится левым операндом.
        2. Есть pending операция и введён новый операнд — немедленное вычисление,
           результат становится левым операндом для нового оператора.
        3. Оператор нажат повторно подряд — меняется только оператор.
        """
        operator = _coerce(Operator, op)
        if operator is None:
            logger.debug("Rejected unknown operator %r", op)
            return state

        pending = ArithmeticOp(operator=operator)
        input_value = self._value(state)

        if state.previous_value is None:
            return state.model_copy(
                update={
                    "previous_value": input_value,
                    "pending_op": pending,
                    "expression": f"{state.display} {operator.value}",
                    "waiting_for_operand": True,
                    "operand_ready": False,
                }
            )

        if state.pending_op is not None and (
            not state.waiting_for_operand or state.operand_ready
        ):
            result = evaluate_pending(state.pending_op, state.previous_value, input_value)
            display = self._format(state, result)
            return state.model_copy(
                update={
                    "display": display,
                    "previous_value": result,
                    "pending_op": pending,
                    "expression": f"{display} {operator.value}",
                    "waiting_for_operand": True,
                    "operand_ready": False,
                }
            )

        return state.model_copy(
            update={
                "pending_op": pending,
                "expression": f"{state.display} {operator.value}",
                "waiting_for_operand": True,
            }
        )

    def perform_equals(self, state: CalculationState) -> CalculationState:
        """Equals: вычисление pending операции и запись в историю.

        Открытые скобки предварительно закрываются. Без pending операции — no-op.
        """
        while state.parentheses_count > 0:
            state = self.input_close_paren(state)

        if state.pending_op is None or state.previous_value is None:
            logger.debug("Equals ignored: no pending operation")
            return state

        input_value = self._value(state)
        result = evaluate_pending(state.pending_op, state.previous_value, input_value)
        display = self._format(state, result)
        full_expression = state.pending_op.describe(
            self._format(state, state.previous_value), state.display
        )

        sequence = state.history_sequence + 1
        entry = HistoryEntry(
            id=f"h{sequence}",
            expression=full_expression,
            result=display,
            timestamp=self.clock(),
        )
        history = ((entry,) + state.history)[: self.config.history_limit]
        logger.debug("Evaluated %s = %s", full_expression, display)

        return state.model_copy(
            update={
                "display": display,
                "expression": f"{full_expression} =",
                "previous_value": None,
                "pending_op": None,
                "waiting_for_operand": True,
                "operand_ready": True,
                "history": history,
                "history_sequence": sequence,
            }
        )

    # -------------------------------------------------------------------------
    # Scientific functions
    # -------------------------------------------------------------------------

    def perform_scientific(
        self, state: CalculationState, name: "ScientificFunction | str"
    ) -> CalculationState:
        """Unary научная функция над текущим display."""
        function = _coerce(ScientificFunction, name)
        if function is None:
            logger.debug("Rejected unknown function %r", name)
            return state

        value = self._value(state)
        if math.isnan(value):
            return state

        result = evaluate_unary(
            function,
            value,
            is_radians=state.is_radians,
            rng=self.rng,
            factorial_limit=self.config.factorial_limit,
        )
        return state.model_copy(
            update={
                "display": self._format(state, result),
                "expression": f"{function.value}({state.display})",
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    def perform_two_arg_scientific(
        self, state: CalculationState, name: "TwoArgFunction | str"
    ) -> CalculationState:
        """Начало функции двух аргументов: display становится первым аргументом."""
        function = _coerce(TwoArgFunction, name)
        if function is None:
            logger.debug("Rejected unknown two-argument function %r", name)
            return state

        value = self._value(state)
        if math.isnan(value):
            return state

        return state.model_copy(
            update={
                "previous_value": value,
                "pending_op": FunctionOp(function=function),
                "expression": f"{function.value}({state.display},",
                "waiting_for_operand": True,
                "operand_ready": False,
            }
        )

    def perform_two_arg_equals(
        self, state: CalculationState, name: "TwoArgFunction | str"
    ) -> CalculationState:
        """Завершение функции двух аргументов с display как вторым аргументом."""
        function = _coerce(TwoArgFunction, name)
        if function is None:
            logger.debug("Rejected unknown two-argument function %r", name)
            return state

        if state.previous_value is None:
            logger.debug("Two-argument equals ignored: no first argument")
            return state

        result = evaluate_two_arg(function, state.previous_value, self._value(state))
        left = self._format(state, state.previous_value)
        return state.model_copy(
            update={
                "display": self._format(state, result),
                "expression": f"{function.value}({left}, {state.display}) =",
                "previous_value": None,
                "pending_op": None,
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    def insert_constant(self, state: CalculationState, name: "Constant | str") -> CalculationState:
        """Подстановка константы (π, e, φ, γ, √2, ln2, ln10)."""
        constant = _coerce(Constant, name)
        if constant is None:
            logger.debug("Rejected unknown constant %r", name)
            return state

        return state.model_copy(
            update={
                "display": self._format(state, CONSTANTS[constant]),
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def toggle_angle_mode(self, state: CalculationState) -> CalculationState:
        return state.model_copy(update={"is_radians": not state.is_radians})

    def toggle_second_function(self, state: CalculationState) -> CalculationState:
        return state.model_copy(update={"is_second_function": not state.is_second_function})

    def set_number_base(self, state: CalculationState, base: "NumberBase | str") -> CalculationState:
        """Смена системы счисления с перерисовкой display.

        Display читается в старой системе и форматируется в новой;
        при уходе из DEC дробная часть отбрасывается (floor).
        """
        number_base = _coerce(NumberBase, base)
        if number_base is None:
            logger.debug("Rejected unknown number base %r", base)
            return state

        value = self._value(state)
        return state.model_copy(
            update={
                "number_base": number_base,
                "display": format_for_base(value, number_base),
            }
        )

    # -------------------------------------------------------------------------
    # Memory
    # -------------------------------------------------------------------------

    def memory_clear(self, state: CalculationState) -> CalculationState:
        return state.model_copy(update={"memory": None})

    def memory_recall(self, state: CalculationState) -> CalculationState:
        """MR: memory в display; пустая memory — no-op."""
        if state.memory is None:
            return state

        return state.model_copy(
            update={
                "display": self._format(state, state.memory),
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    def _store_memory(self, state: CalculationState, memory: float) -> CalculationState:
        return state.model_copy(
            update={
                "memory": memory,
                "waiting_for_operand": True,
                "operand_ready": state.operand_ready or not state.waiting_for_operand,
            }
        )

    def memory_add(self, state: CalculationState) -> CalculationState:
        """M+: memory += display (пустая memory считается нулём)."""
        value = self._value(state)
        if math.isnan(value):
            return state
        current = state.memory if state.memory is not None else 0.0
        return self._store_memory(state, current + value)

    def memory_subtract(self, state: CalculationState) -> CalculationState:
        """M-: memory -= display (пустая memory считается нулём)."""
        value = self._value(state)
        if math.isnan(value):
            return state
        current = state.memory if state.memory is not None else 0.0
        return self._store_memory(state, current - value)

    def memory_store(self, state: CalculationState) -> CalculationState:
        """MS: memory = display."""
        value = self._value(state)
        if math.isnan(value):
            return state
        return self._store_memory(state, value)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def select_history_entry(
        self, state: CalculationState, entry: HistoryEntry
    ) -> CalculationState:
        """Продолжение вычислений с результата из истории."""
        return state.model_copy(
            update={
                "display": entry.result,
                "expression": "",
                "previous_value": None,
                "pending_op": None,
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )

    def clear_history(self, state: CalculationState) -> CalculationState:
        return state.model_copy(update={"history": ()})

    # -------------------------------------------------------------------------
    # Parentheses
    # -------------------------------------------------------------------------

    def input_open_paren(self, state: CalculationState) -> CalculationState:
        """'(': внешний контекст уходит во фрейм, внутри начинается новое вычисление."""
        frame = ParenFrame(
            previous_value=state.previous_value,
            pending_op=state.pending_op,
            expression=state.expression,
        )
        return state.model_copy(
            update={
                "expression_stack": state.expression_stack + (frame,),
                "display": "0",
                "previous_value": None,
                "pending_op": None,
                "parentheses_count": state.parentheses_count + 1,
                "expression": state.expression + "(",
                "waiting_for_operand": True,
                "operand_ready": False,
            }
        )

    def input_close_paren(self, state: CalculationState) -> CalculationState:
        """')': вычисление группы и подстановка результата как операнда.

        Pending операция внутри скобок вычисляется, внешний контекст
        (левый операнд и оператор) восстанавливается из фрейма.
        """
        if state.parentheses_count <= 0:
            logger.debug("Close paren ignored: no open group")
            return state

        frame = state.expression_stack[-1]
        value = self._value(state)

        if state.pending_op is not None and state.previous_value is not None:
            result = evaluate_pending(state.pending_op, state.previous_value, value)
            inner = state.pending_op.describe(
                self._format(state, state.previous_value), state.display
            )
        else:
            result = value
            inner = state.display

        return state.model_copy(
            update={
                "display": self._format(state, result),
                "previous_value": frame.previous_value,
                "pending_op": frame.pending_op,
                "parentheses_count": state.parentheses_count - 1,
                "expression_stack": state.expression_stack[:-1],
                "expression": f"{frame.expression}({inner})",
                "waiting_for_operand": True,
                "operand_ready": True,
            }
        )
