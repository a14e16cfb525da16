"""
Numerical Safeguards — IEEE-совместимые математические примитивы

Модуль обеспечивает "sticky NaN" семантику для всех вычислений калькулятора:
- Деление на ноль в арифметике даёт NaN (не исключение)
- Domain errors (sqrt(-1), asin(2), log(-1)) дают NaN
- Overflow (exp(1000), 10^400) даёт ±inf с корректным знаком
- NaN/Inf на входе пропагируют дальше без изменений

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна функция модуля не выбрасывает ValueError/OverflowError/ZeroDivisionError
2. NaN на входе всегда даёт NaN на выходе (кроме явно оговорённых случаев)
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Callable, Final

# =============================================================================
# IEEE-КОНСТАНТЫ
# =============================================================================

NAN: Final[float] = float("nan")
INF: Final[float] = float("inf")


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float конечным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение finite
    """
    return math.isfinite(value)


def is_odd_integer(value: float) -> bool:
    """Нечётное целое (для знака pow при отрицательном основании)."""
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


# =============================================================================
# БЕЗОПАСНЫЕ ОПЕРАЦИИ
# =============================================================================


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Деление для оператора ÷: при нулевом делителе возвращает NaN.

    Args:
        numerator: Числитель
        denominator: Знаменатель

    Returns:
        numerator / denominator, либо NaN если denominator == 0

    Examples:
        >>> safe_divide(10.0, 4.0)
        2.5
        >>> safe_divide(5.0, 0.0)
        nan
    """
    if denominator == 0:
        return NAN
    return numerator / denominator


def safe_reciprocal(value: float) -> float:
    """
    1/x с IEEE-семантикой: 1/0 = inf, 1/-0 = -inf.

    Examples:
        >>> safe_reciprocal(4.0)
        0.25
        >>> safe_reciprocal(0.0)
        inf
    """
    if value == 0:
        return math.copysign(INF, value)
    return 1.0 / value


def safe_remainder(dividend: float, divisor: float) -> float:
    """
    Остаток со знаком делимого (truncated division).

    Examples:
        >>> safe_remainder(-7.0, 3.0)
        -1.0
        >>> safe_remainder(7.0, 0.0)
        nan
    """
    try:
        return math.fmod(dividend, divisor)
    except ValueError:
        return NAN


def safe_pow(base: float, exponent: float) -> float:
    """
    Возведение в степень с IEEE-семантикой.

    Отличия от math.pow:
    - 0 ** отрицательное -> ±inf (вместо ValueError)
    - отрицательное ** дробное -> NaN (вместо ValueError)
    - overflow -> ±inf (вместо OverflowError)
    - 1 ** NaN и ±1 ** ±inf -> NaN

    Args:
        base: Основание
        exponent: Показатель

    Returns:
        base ** exponent

    Examples:
        >>> safe_pow(2.0, 10.0)
        1024.0
        >>> safe_pow(-8.0, 1 / 3)
        nan
        >>> safe_pow(0.0, -1.0)
        inf
    """
    if math.isnan(exponent):
        return NAN
    if math.isinf(exponent) and abs(base) == 1:
        return NAN

    if base == 0 and exponent < 0:
        if is_odd_integer(exponent):
            return math.copysign(INF, base)
        return INF

    try:
        return math.pow(base, exponent)
    except ValueError:
        return NAN
    except OverflowError:
        if base < 0 and is_odd_integer(exponent):
            return -INF
        return INF


def safe_log(func: Callable[[float], float], value: float) -> float:
    """
    Логарифм с IEEE-семантикой: log(0) = -inf, log(<0) = NaN.

    Args:
        func: math.log / math.log10 / math.log2
        value: Аргумент

    Returns:
        func(value) либо -inf/NaN на границе области определения
    """
    if math.isnan(value) or value < 0:
        return NAN
    if value == 0:
        return -INF
    return func(value)


def guarded(
    func: Callable[[float], float],
    overflow: Callable[[float], float] | None = None,
) -> Callable[[float], float]:
    """
    Обёртка unary-функции math: ValueError -> NaN, OverflowError -> inf.

    Args:
        func: Исходная функция (math.sqrt, math.asin, math.exp, ...)
        overflow: Значение при переполнении как функция аргумента
            (default: +inf со знаком аргумента)

    Returns:
        Функция, никогда не выбрасывающая domain/overflow исключений

    Examples:
        >>> guarded(math.sqrt)(-1.0)
        nan
        >>> guarded(math.exp, overflow=lambda x: INF)(1000.0)
        inf
    """

    def wrapper(value: float) -> float:
        try:
            return func(value)
        except ValueError:
            return NAN
        except OverflowError:
            if overflow is not None:
                return overflow(value)
            return math.copysign(INF, value)

    wrapper.__name__ = getattr(func, "__name__", "guarded")
    wrapper.__doc__ = getattr(func, "__doc__", None)
    return wrapper


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def floor_value(value: float) -> float:
    """floor для float; NaN/Inf возвращаются без изменений."""
    if not math.isfinite(value):
        return value
    return float(math.floor(value))


def ceil_value(value: float) -> float:
    """ceil для float; NaN/Inf возвращаются без изменений."""
    if not math.isfinite(value):
        return value
    return float(math.ceil(value))


def round_half_up(value: float) -> float:
    """
    Округление половины вверх (к +inf), как у карманных калькуляторов.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(-2.5)
        -2.0
    """
    if not math.isfinite(value):
        return value
    rounded = float(math.floor(value))
    if value - rounded >= 0.5:
        rounded += 1.0
    return rounded


def sign_of(value: float) -> float:
    """Знак числа: -1.0, 0.0 (с сохранением -0.0), 1.0 или NaN."""
    if math.isnan(value) or value == 0:
        return value
    return math.copysign(1.0, value)
