"""
Core math modules калькулятора

Математические примитивы с IEEE-семантикой, системы счисления и таблицы операций.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    INF,
    NAN,
    ceil_value,
    floor_value,
    guarded,
    is_valid_float,
    round_half_up,
    safe_divide,
    safe_log,
    safe_pow,
    safe_reciprocal,
    safe_remainder,
    sign_of,
)

# Number Base
from src.core.math.number_base import (
    MAX_INPUT_DIGITS,
    count_digits,
    format_decimal,
    format_for_base,
    get_decimal_value,
    normalize_digit,
    parse_decimal,
    parse_integer,
)

# Scientific
from src.core.math.scientific import (
    BINARY_OPERATIONS,
    CONSTANTS,
    FACTORIAL_LIMIT,
    TWO_ARG_FUNCTIONS,
    UNARY_FUNCTIONS,
    AngleUsage,
    UnaryFunctionSpec,
    calculate,
    combination,
    evaluate_pending,
    evaluate_two_arg,
    evaluate_unary,
    factorial,
    gcd,
    lcm,
    nth_root,
    permutation,
)

__all__ = [
    # Numerical Safeguards — Constants
    "INF",
    "NAN",
    # Numerical Safeguards — Functions
    "ceil_value",
    "floor_value",
    "guarded",
    "is_valid_float",
    "round_half_up",
    "safe_divide",
    "safe_log",
    "safe_pow",
    "safe_reciprocal",
    "safe_remainder",
    "sign_of",
    # Number Base — Constants
    "MAX_INPUT_DIGITS",
    # Number Base — Functions
    "count_digits",
    "format_decimal",
    "format_for_base",
    "get_decimal_value",
    "normalize_digit",
    "parse_decimal",
    "parse_integer",
    # Scientific — Tables
    "BINARY_OPERATIONS",
    "CONSTANTS",
    "FACTORIAL_LIMIT",
    "TWO_ARG_FUNCTIONS",
    "UNARY_FUNCTIONS",
    # Scientific — Types
    "AngleUsage",
    "UnaryFunctionSpec",
    # Scientific — Functions
    "calculate",
    "combination",
    "evaluate_pending",
    "evaluate_two_arg",
    "evaluate_unary",
    "factorial",
    "gcd",
    "lcm",
    "nth_root",
    "permutation",
]
