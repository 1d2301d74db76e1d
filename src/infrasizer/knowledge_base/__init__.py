"""Knowledge base: calculation config table and platform recommendations."""

from .calculation_config import (
    CalculationConfigRepository,
    get_calculation_config,
    resolve_config,
)
from .platform_recommendations import (
    BrowserRecommendation,
    PlatformRecommendationRepository,
    PlatformRecommendations,
    SoftwareRecommendation,
)

__all__ = [
    "BrowserRecommendation",
    "CalculationConfigRepository",
    "PlatformRecommendationRepository",
    "PlatformRecommendations",
    "SoftwareRecommendation",
    "get_calculation_config",
    "resolve_config",
]
