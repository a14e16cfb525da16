"""Calculator engine — командный движок и привязка клавиатуры.

- CalculatorEngine: чистые команды (CalculationState, input) -> CalculationState
- dispatch_key: маппинг клавиш хоста на команды
"""

from .calculator import CalculatorEngine, EngineConfig
from .keymap import KeyResult, dispatch_key

__all__ = [
    "CalculatorEngine",
    "EngineConfig",
    "KeyResult",
    "dispatch_key",
]
