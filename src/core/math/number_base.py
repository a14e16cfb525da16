"""
Number Base — Парсинг и форматирование display в DEC/HEX/OCT/BIN

Единственный допустимый способ преобразований между:
- display (строка в активной системе счисления)
- decimal value (float, используется во всех вычислениях)

DEC форматируется как ECMAScript Number#toString (целые без '.0',
'NaN', 'Infinity', экспонента вне [1e-6, 1e21)).
HEX/OCT/BIN: значение округляется вниз (floor) до целого.
"""

import math
import re
from decimal import Decimal
from typing import Final

from src.core.domain.operations import NumberBase
from src.core.math.numerical_safeguards import NAN, INF

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Лимит количества цифр при вводе
MAX_INPUT_DIGITS: Final[int] = 15

# Границы позиционной записи DEC (как у Number#toString)
POSITIONAL_MIN_ABS: Final[float] = 1e-6
POSITIONAL_MAX_ABS: Final[float] = 1e21

NAN_TEXT: Final[str] = "NaN"
INFINITY_TEXT: Final[str] = "Infinity"

_DIGITS: Final[dict[NumberBase, str]] = {
    NumberBase.DEC: "0123456789",
    NumberBase.HEX: "0123456789ABCDEF",
    NumberBase.OCT: "01234567",
    NumberBase.BIN: "01",
}

_DECIMAL_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

_INTEGER_PREFIX: Final[dict[NumberBase, re.Pattern[str]]] = {
    NumberBase.HEX: re.compile(r"^\s*([+-]?)([0-9A-Fa-f]+)"),
    NumberBase.OCT: re.compile(r"^\s*([+-]?)([0-7]+)"),
    NumberBase.BIN: re.compile(r"^\s*([+-]?)([01]+)"),
}

_COUNTED_CHAR = re.compile(r"[0-9A-Fa-f]")


# =============================================================================
# ВАЛИДАЦИЯ ЦИФР
# =============================================================================


def normalize_digit(digit: str, base: NumberBase) -> str | None:
    """
    Проверка и нормализация цифры для системы счисления.

    Args:
        digit: Введённый символ (регистр не важен)
        base: Активная система счисления

    Returns:
        Цифра в верхнем регистре, либо None если цифра недопустима

    Examples:
        >>> normalize_digit("a", NumberBase.HEX)
        'A'
        >>> normalize_digit("8", NumberBase.OCT) is None
        True
    """
    if len(digit) != 1:
        return None
    upper = digit.upper()
    if upper in _DIGITS[base]:
        return upper
    return None


def count_digits(display: str) -> int:
    """Количество цифровых символов (0-9, A-F) в display; знак и точка не считаются."""
    return len(_COUNTED_CHAR.findall(display))


# =============================================================================
# ПАРСИНГ
# =============================================================================


def parse_decimal(text: str) -> float:
    """
    Парсинг десятичной строки с семантикой parseFloat.

    Берётся самый длинный валидный префикс; если его нет — NaN.

    Examples:
        >>> parse_decimal("3.5")
        3.5
        >>> parse_decimal("0.")
        0.0
        >>> parse_decimal("-")
        nan
    """
    match = _DECIMAL_PREFIX.match(text)
    if match is None:
        return NAN
    return float(match.group(1))


def parse_integer(text: str, base: NumberBase) -> float:
    """
    Парсинг целой строки в HEX/OCT/BIN с семантикой parseInt.

    Args:
        text: Строка display
        base: HEX, OCT или BIN

    Returns:
        Значение как float, NaN если нет ни одной валидной цифры
    """
    match = _INTEGER_PREFIX[base].match(text)
    if match is None:
        return NAN
    sign, digits = match.groups()
    magnitude = int(digits, base.radix)
    try:
        value = float(magnitude)
    except OverflowError:
        value = INF
    return -value if sign == "-" else value


def get_decimal_value(display: str, base: NumberBase) -> float:
    """
    Значение display в активной системе счисления.

    DEC — parseFloat; HEX/OCT/BIN — parseInt с radix 16/8/2.

    Examples:
        >>> get_decimal_value("FF", NumberBase.HEX)
        255.0
        >>> get_decimal_value("101", NumberBase.BIN)
        5.0
    """
    if base == NumberBase.DEC:
        return parse_decimal(display)
    return parse_integer(display, base)


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def _normalize_exponent(text: str) -> str:
    # repr даёт '1e-07' / '1.5e+22', нужно '1e-7' / '1.5e+22'
    mantissa, _, exponent = text.partition("e")
    power = int(exponent)
    sign = "+" if power >= 0 else "-"
    return f"{mantissa}e{sign}{abs(power)}"


def format_decimal(value: float) -> str:
    """
    Строковое представление числа как у Number#toString.

    Examples:
        >>> format_decimal(5.0)
        '5'
        >>> format_decimal(0.1 + 0.2)
        '0.30000000000000004'
        >>> format_decimal(1e21)
        '1e+21'
        >>> format_decimal(float("-inf"))
        '-Infinity'
    """
    if math.isnan(value):
        return NAN_TEXT
    if math.isinf(value):
        return INFINITY_TEXT if value > 0 else f"-{INFINITY_TEXT}"
    if value == 0:
        return "0"

    magnitude = abs(value)
    if POSITIONAL_MIN_ABS <= magnitude < POSITIONAL_MAX_ABS:
        # кратчайшие round-trip цифры, дополненные нулями (2**60 -> ...847000)
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    # вне позиционного диапазона repr всегда в экспоненциальной записи
    return _normalize_exponent(repr(value))


def format_for_base(value: float, base: NumberBase) -> str:
    """
    Форматирование значения для активной системы счисления.

    Args:
        value: Decimal значение
        base: Целевая система счисления

    Returns:
        DEC — format_decimal(value) без приведения к целому;
        HEX/OCT/BIN — floor(value) в целевой системе (HEX в верхнем регистре).
        NaN/Inf всегда 'NaN'/'Infinity'/'-Infinity'.

    Examples:
        >>> format_for_base(255.9, NumberBase.HEX)
        'FF'
        >>> format_for_base(-5.0, NumberBase.BIN)
        '-101'
    """
    if not math.isfinite(value) or base == NumberBase.DEC:
        return format_decimal(value)

    integer = math.floor(value)
    sign = "-" if integer < 0 else ""
    magnitude = abs(integer)

    if base == NumberBase.HEX:
        return f"{sign}{magnitude:X}"
    if base == NumberBase.OCT:
        return f"{sign}{magnitude:o}"
    return f"{sign}{magnitude:b}"
