"""
CalculationState — Модель состояния сессии калькулятора

Immutable Pydantic модель: каждая команда engine получает текущий снапшот
и возвращает новый (model_copy), исходный никогда не мутируется.

Содержит:
- Текущий display и trace выражения
- Pending операцию (PendingOp: ArithmeticOp | FunctionOp) и левый операнд
- Memory register, history (most-recent-first), angle mode, number base
- Стек скобок (ParenFrame) для grouped evaluation
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator

from .operations import NumberBase, Operator, TwoArgFunction


# =============================================================================
# PENDING OPERATION
# =============================================================================


class ArithmeticOp(BaseModel):
    """Pending бинарный оператор (+ - × ÷ ^ mod yroot)."""

    kind: Literal["arithmetic"] = "arithmetic"
    operator: Operator = Field(..., description="Бинарный оператор")

    model_config = {"frozen": True}

    @property
    def symbol(self) -> str:
        return self.operator.value

    def describe(self, left: str, right: str) -> str:
        """Trace вида '2 + 3'."""
        return f"{left} {self.symbol} {right}"


class FunctionOp(BaseModel):
    """Pending научная функция двух аргументов (gcd, lcm, nPr, nCr, yroot)."""

    kind: Literal["function"] = "function"
    function: TwoArgFunction = Field(..., description="Функция двух аргументов")

    model_config = {"frozen": True}

    @property
    def symbol(self) -> str:
        return self.function.value

    def describe(self, left: str, right: str) -> str:
        """Trace вида 'nCr(5, 2)'."""
        return f"{self.symbol}({left}, {right})"


PendingOp = Annotated[Union[ArithmeticOp, FunctionOp], Field(discriminator="kind")]


# =============================================================================
# NESTED MODELS
# =============================================================================


class HistoryEntry(BaseModel):
    """
    Запись истории вычислений.

    Создаётся только завершённым equals; никогда не изменяется.
    """

    id: str = Field(..., min_length=1, description="Уникальный идентификатор записи")
    expression: str = Field(..., description="Выражение, например '2 + 3'")
    result: str = Field(..., min_length=1, description="Отформатированный результат")
    timestamp: datetime = Field(..., description="Время вычисления (UTC)")

    model_config = {"frozen": True}


class ParenFrame(BaseModel):
    """
    Сохранённый внешний контекст открытой скобки.

    На '(' текущая pending операция уходит во фрейм, внутри скобок
    начинается новое вычисление; на ')' результат группы подставляется
    как операнд, а внешний контекст восстанавливается.
    """

    previous_value: float | None = Field(None, description="Внешний левый операнд")
    pending_op: PendingOp | None = Field(None, description="Внешняя pending операция")
    expression: str = Field("", description="Trace до открытия скобки")

    model_config = {"frozen": True}


# =============================================================================
# CALCULATION STATE
# =============================================================================


class CalculationState(BaseModel):
    """
    Полный снапшот состояния калькулятора.

    Инварианты:
    - pending_op задан тогда и только тогда, когда задан previous_value
    - parentheses_count == len(expression_stack)
    - display никогда не пустой
    """

    display: str = Field("0", min_length=1, description="Текущее значение на экране")
    expression: str = Field("", description="Человекочитаемый trace операции")
    previous_value: float | None = Field(
        None, description="Левый операнд pending операции"
    )
    pending_op: PendingOp | None = Field(None, description="Pending операция")
    waiting_for_operand: bool = Field(
        False, description="Следующая цифра начинает новое число"
    )
    operand_ready: bool = Field(
        False,
        description="Display содержит вычисленный операнд (функция, константа, MR, ')')",
    )
    memory: float | None = Field(None, description="Memory register")
    history: tuple[HistoryEntry, ...] = Field(
        default=(), description="История, most-recent-first"
    )
    history_sequence: int = Field(
        0, ge=0, description="Монотонный счётчик для id записей истории"
    )
    is_radians: bool = Field(True, description="Angle mode для тригонометрии")
    number_base: NumberBase = Field(NumberBase.DEC, description="Активная система счисления")
    is_second_function: bool = Field(False, description="Альтернативный набор функций")
    parentheses_count: int = Field(0, ge=0, description="Глубина вложенности скобок")
    expression_stack: tuple[ParenFrame, ...] = Field(
        default=(), description="Фреймы открытых скобок"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_invariants(self) -> "CalculationState":
        """Проверка согласованности pending операции и стека скобок."""
        if (self.pending_op is None) != (self.previous_value is None):
            raise ValueError("pending_op and previous_value must be set together")
        if self.parentheses_count != len(self.expression_stack):
            raise ValueError(
                f"parentheses_count={self.parentheses_count} does not match "
                f"expression_stack depth={len(self.expression_stack)}"
            )
        return self

    @property
    def operator(self) -> Operator | TwoArgFunction | None:
        """Pending оператор или имя функции (для отображения)."""
        if self.pending_op is None:
            return None
        if isinstance(self.pending_op, ArithmeticOp):
            return self.pending_op.operator
        return self.pending_op.function

    def snapshot(self) -> dict[str, Any]:
        """
        Наблюдаемые поля состояния как plain dict.

        Формат соответствует src/core/contracts/schema/calculator_snapshot.json.
        """
        return {
            "display": self.display,
            "expression": self.expression,
            "memory": self.memory,
            "history": [entry.model_dump(mode="json") for entry in self.history],
            "is_radians": self.is_radians,
            "number_base": self.number_base.value,
            "is_second_function": self.is_second_function,
            "parentheses_count": self.parentheses_count,
        }
