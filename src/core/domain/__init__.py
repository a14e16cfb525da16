"""
Domain models and value objects.

Contains the calculation state snapshot, history entries and the closed
enumerations of every operation the engine accepts.
"""

from src.core.domain.calculation_state import (
    ArithmeticOp,
    CalculationState,
    FunctionOp,
    HistoryEntry,
    ParenFrame,
    PendingOp,
)
from src.core.domain.operations import (
    Constant,
    NumberBase,
    Operator,
    ScientificFunction,
    TwoArgFunction,
)

__all__ = [
    # State models
    "CalculationState",
    "HistoryEntry",
    "ParenFrame",
    "PendingOp",
    "ArithmeticOp",
    "FunctionOp",
    # Operation enums
    "NumberBase",
    "Operator",
    "TwoArgFunction",
    "ScientificFunction",
    "Constant",
]
