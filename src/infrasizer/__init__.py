"""InfraSizer: rule-based infrastructure sizing engine."""

from .knowledge_base import get_calculation_config, resolve_config
from .shared.schemas import CalculationResult, ConfigTable, SizingRequest
from .sizing import calculate_infra

__version__ = "0.1.0"

__all__ = [
    "CalculationResult",
    "ConfigTable",
    "SizingRequest",
    "calculate_infra",
    "get_calculation_config",
    "resolve_config",
]
