"""
Scientific — Таблицы операций калькулятора

Все операции заданы статическими таблицами, ключ — закрытый Enum:
- BINARY_OPERATIONS: Operator -> (a, b) -> float
- TWO_ARG_FUNCTIONS: TwoArgFunction -> (a, b) -> float
- UNARY_FUNCTIONS: ScientificFunction -> UnaryFunctionSpec
- CONSTANTS: Constant -> float

Ни одна функция не выбрасывает исключений на математически неопределённых
входах: результат NaN или ±inf пропагирует дальше ("sticky NaN").
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final

from src.core.domain.calculation_state import ArithmeticOp, FunctionOp
from src.core.domain.operations import (
    Constant,
    Operator,
    ScientificFunction,
    TwoArgFunction,
)
from src.core.math.numerical_safeguards import (
    INF,
    NAN,
    ceil_value,
    floor_value,
    guarded,
    round_half_up,
    safe_divide,
    safe_log,
    safe_pow,
    safe_reciprocal,
    safe_remainder,
    sign_of,
)

BinaryFunc = Callable[[float, float], float]
UnaryFunc = Callable[[float], float]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Выше этого n факториал переполняет float64
FACTORIAL_LIMIT: Final[int] = 170

EULER_MASCHERONI: Final[float] = 0.5772156649015329

CONSTANTS: Final[dict[Constant, float]] = {
    Constant.PI: math.pi,
    Constant.E: math.e,
    Constant.PHI: (1 + math.sqrt(5)) / 2,
    Constant.GAMMA: EULER_MASCHERONI,
    Constant.SQRT2: math.sqrt(2),
    Constant.LN2: math.log(2),
    Constant.LN10: math.log(10),
}


def degrees_to_radians(value: float) -> float:
    return value * math.pi / 180


def radians_to_degrees(value: float) -> float:
    return value * 180 / math.pi


# =============================================================================
# КОМБИНАТОРИКА И ТЕОРИЯ ЧИСЕЛ
# =============================================================================


def factorial(n: float, limit: int = FACTORIAL_LIMIT) -> float:
    """
    Факториал итеративным произведением 2..floor(n).

    Args:
        n: Аргумент
        limit: Порог, выше которого возвращается inf

    Returns:
        n! как float; NaN для отрицательных и NaN, inf для n > limit

    Examples:
        >>> factorial(5)
        120.0
        >>> factorial(171)
        inf
        >>> factorial(-1)
        nan
    """
    if math.isnan(n) or n < 0:
        return NAN
    if n > limit:
        return INF
    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result


def gcd(a: float, b: float) -> float:
    """
    НОД алгоритмом Евклида на abs(floor(x)).

    Examples:
        >>> gcd(12, 18)
        6.0
        >>> gcd(-12.7, 18)
        1.0
    """
    x = abs(floor_value(a))
    y = abs(floor_value(b))
    if not (math.isfinite(x) and math.isfinite(y)):
        return NAN
    while y:
        x, y = y, x % y
    return x


def lcm(a: float, b: float) -> float:
    """
    НОК через НОД: |floor(a) * floor(b)| / gcd(a, b).

    lcm(0, 0) = NaN (0 / 0).
    """
    return safe_divide(abs(floor_value(a) * floor_value(b)), gcd(a, b))


def permutation(n: float, r: float) -> float:
    """Размещения nPr = n! / (n - r)!; NaN если r > n или операнд отрицательный."""
    if r > n or n < 0 or r < 0:
        return NAN
    return factorial(n) / factorial(n - r)


def combination(n: float, r: float) -> float:
    """Сочетания nCr = n! / (r! * (n - r)!); NaN если r > n или операнд отрицательный."""
    if r > n or n < 0 or r < 0:
        return NAN
    return factorial(n) / (factorial(r) * factorial(n - r))


def nth_root(a: float, b: float) -> float:
    """Корень степени b из a: a ** (1 / b)."""
    return safe_pow(a, safe_reciprocal(b))


# =============================================================================
# БИНАРНЫЕ ОПЕРАЦИИ
# =============================================================================

BINARY_OPERATIONS: Final[dict[Operator, BinaryFunc]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUBTRACT: lambda a, b: a - b,
    Operator.MULTIPLY: lambda a, b: a * b,
    Operator.DIVIDE: safe_divide,
    Operator.POWER: safe_pow,
    Operator.MOD: safe_remainder,
    Operator.YROOT: nth_root,
}

TWO_ARG_FUNCTIONS: Final[dict[TwoArgFunction, BinaryFunc]] = {
    TwoArgFunction.GCD: gcd,
    TwoArgFunction.LCM: lcm,
    TwoArgFunction.NPR: permutation,
    TwoArgFunction.NCR: combination,
    TwoArgFunction.YROOT: nth_root,
}


def calculate(a: float, b: float, op: Operator) -> float:
    """
    Применение бинарного оператора.

    Examples:
        >>> calculate(2, 3, Operator.POWER)
        8.0
        >>> calculate(5, 0, Operator.DIVIDE)
        nan
    """
    return BINARY_OPERATIONS[op](a, b)


def evaluate_two_arg(function: TwoArgFunction, a: float, b: float) -> float:
    """Применение функции двух аргументов."""
    return TWO_ARG_FUNCTIONS[function](a, b)


def evaluate_pending(pending_op: ArithmeticOp | FunctionOp, a: float, b: float) -> float:
    """
    Единая точка вычисления pending операции.

    Args:
        pending_op: ArithmeticOp или FunctionOp из состояния
        a: Левый операнд (previous_value)
        b: Правый операнд (текущий display)
    """
    if isinstance(pending_op, ArithmeticOp):
        return calculate(a, b, pending_op.operator)
    return evaluate_two_arg(pending_op.function, a, b)


# =============================================================================
# UNARY ФУНКЦИИ
# =============================================================================


class AngleUsage(str, Enum):
    """Как функция зависит от angle mode."""

    NONE = "NONE"
    ARGUMENT = "ARGUMENT"  # аргумент в градусах переводится в радианы
    RESULT = "RESULT"  # результат в радианах переводится в градусы


@dataclass(frozen=True)
class UnaryFunctionSpec:
    """Описание unary функции в таблице."""

    func: UnaryFunc
    angle: AngleUsage = AngleUsage.NONE


def _atanh(value: float) -> float:
    if abs(value) == 1:
        return math.copysign(INF, value)
    return guarded(math.atanh)(value)


UNARY_FUNCTIONS: Final[dict[ScientificFunction, UnaryFunctionSpec]] = {
    # Тригонометрия
    ScientificFunction.SIN: UnaryFunctionSpec(guarded(math.sin), AngleUsage.ARGUMENT),
    ScientificFunction.COS: UnaryFunctionSpec(guarded(math.cos), AngleUsage.ARGUMENT),
    ScientificFunction.TAN: UnaryFunctionSpec(guarded(math.tan), AngleUsage.ARGUMENT),
    ScientificFunction.ASIN: UnaryFunctionSpec(guarded(math.asin), AngleUsage.RESULT),
    ScientificFunction.ACOS: UnaryFunctionSpec(guarded(math.acos), AngleUsage.RESULT),
    ScientificFunction.ATAN: UnaryFunctionSpec(guarded(math.atan), AngleUsage.RESULT),
    # Гиперболические
    ScientificFunction.SINH: UnaryFunctionSpec(guarded(math.sinh)),
    ScientificFunction.COSH: UnaryFunctionSpec(guarded(math.cosh, overflow=lambda x: INF)),
    ScientificFunction.TANH: UnaryFunctionSpec(math.tanh),
    ScientificFunction.ASINH: UnaryFunctionSpec(math.asinh),
    ScientificFunction.ACOSH: UnaryFunctionSpec(guarded(math.acosh)),
    ScientificFunction.ATANH: UnaryFunctionSpec(_atanh),
    # Логарифмы
    ScientificFunction.LOG: UnaryFunctionSpec(lambda x: safe_log(math.log10, x)),
    ScientificFunction.LN: UnaryFunctionSpec(lambda x: safe_log(math.log, x)),
    ScientificFunction.LOG2: UnaryFunctionSpec(lambda x: safe_log(math.log2, x)),
    # Степени и корни
    ScientificFunction.SQRT: UnaryFunctionSpec(guarded(math.sqrt)),
    ScientificFunction.CBRT: UnaryFunctionSpec(math.cbrt),
    ScientificFunction.SQUARE: UnaryFunctionSpec(lambda x: x * x),
    ScientificFunction.CUBE: UnaryFunctionSpec(lambda x: x * x * x),
    ScientificFunction.RECIPROCAL: UnaryFunctionSpec(safe_reciprocal),
    ScientificFunction.EXP: UnaryFunctionSpec(guarded(math.exp, overflow=lambda x: INF)),
    ScientificFunction.POW10: UnaryFunctionSpec(lambda x: safe_pow(10.0, x)),
    ScientificFunction.POW2: UnaryFunctionSpec(lambda x: safe_pow(2.0, x)),
    # Специальные
    ScientificFunction.ABS: UnaryFunctionSpec(abs),
    ScientificFunction.FLOOR: UnaryFunctionSpec(floor_value),
    ScientificFunction.CEIL: UnaryFunctionSpec(ceil_value),
    ScientificFunction.ROUND: UnaryFunctionSpec(round_half_up),
    ScientificFunction.SIGN: UnaryFunctionSpec(sign_of),
    ScientificFunction.DTOR: UnaryFunctionSpec(degrees_to_radians),
    ScientificFunction.RTOD: UnaryFunctionSpec(radians_to_degrees),
}


# RAND и FACT вычисляются в evaluate_unary (rng и factorial_limit движка)


def evaluate_unary(
    function: ScientificFunction,
    value: float,
    is_radians: bool = True,
    rng: random.Random | None = None,
    factorial_limit: int = FACTORIAL_LIMIT,
) -> float:
    """
    Вычисление unary научной функции.

    Args:
        function: Функция из ScientificFunction
        value: Аргумент (decimal)
        is_radians: Angle mode; в режиме градусов тригонометрия
            переводит аргумент/результат
        rng: Источник случайных чисел для RAND (default: модуль random)
        factorial_limit: Порог факториала, выше которого результат inf

    Returns:
        Результат (может быть NaN/inf)

    Examples:
        >>> evaluate_unary(ScientificFunction.SIN, 90.0, is_radians=False)
        1.0
        >>> evaluate_unary(ScientificFunction.FACT, 5.0)
        120.0
    """
    if function == ScientificFunction.RAND:
        return (rng or random).random()
    if function == ScientificFunction.FACT:
        return factorial(floor_value(value), limit=factorial_limit)

    spec = UNARY_FUNCTIONS[function]
    if is_radians or spec.angle == AngleUsage.NONE:
        return spec.func(value)
    if spec.angle == AngleUsage.ARGUMENT:
        return spec.func(degrees_to_radians(value))
    return radians_to_degrees(spec.func(value))
