"""
Operations — Закрытые перечисления команд калькулятора

Все имена операций, которые принимает engine, определены здесь как str Enum.
Строковые значения совпадают с метками кнопок хоста, поэтому
Operator("×") и ScientificFunction("1/x") работают напрямую.
"""

from enum import Enum


# =============================================================================
# NUMBER BASE
# =============================================================================


class NumberBase(str, Enum):
    """Система счисления для ввода и отображения."""

    DEC = "DEC"
    HEX = "HEX"
    OCT = "OCT"
    BIN = "BIN"

    @property
    def radix(self) -> int:
        return _RADIX[self]


_RADIX = {
    NumberBase.DEC: 10,
    NumberBase.HEX: 16,
    NumberBase.OCT: 8,
    NumberBase.BIN: 2,
}


# =============================================================================
# BINARY OPERATORS
# =============================================================================


class Operator(str, Enum):
    """Бинарный арифметический оператор (left-to-right, без приоритетов)."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"
    POWER = "^"
    MOD = "mod"
    YROOT = "yroot"


class TwoArgFunction(str, Enum):
    """
    Научная функция двух аргументов.

    Ставится в очередь как бинарный оператор: первый операнд запоминается,
    второй вводится пользователем.
    """

    GCD = "gcd"
    LCM = "lcm"
    NPR = "nPr"
    NCR = "nCr"
    YROOT = "yroot"


# =============================================================================
# UNARY FUNCTIONS
# =============================================================================


class ScientificFunction(str, Enum):
    """Unary научная функция, применяемая к текущему display."""

    # Тригонометрия (зависит от angle mode)
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"

    # Гиперболические (всегда в радианах)
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    ASINH = "asinh"
    ACOSH = "acosh"
    ATANH = "atanh"

    # Логарифмы
    LOG = "log"
    LN = "ln"
    LOG2 = "log2"

    # Степени и корни
    SQRT = "sqrt"
    CBRT = "cbrt"
    SQUARE = "x2"
    CUBE = "x3"
    RECIPROCAL = "1/x"
    EXP = "exp"
    POW10 = "10x"
    POW2 = "2x"

    # Специальные
    FACT = "fact"
    ABS = "abs"
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"
    SIGN = "sign"
    RAND = "rand"
    DTOR = "dtor"
    RTOD = "rtod"


# =============================================================================
# CONSTANTS
# =============================================================================


class Constant(str, Enum):
    """Именованная математическая константа."""

    PI = "π"
    E = "e"
    PHI = "φ"
    GAMMA = "γ"
    SQRT2 = "√2"
    LN2 = "ln2"
    LN10 = "ln10"
