"""Data access layer for platform recommendations (software and browser support)."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent.parent / "data" / "platform_recommendations.json"


class SoftwareRecommendation(BaseModel):
    """Supported software version for a hosted component."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    software: str
    supported_version: str
    component_hosted: str
    comments: str = ""


class BrowserRecommendation(BaseModel):
    """Supported browser version."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    browser: str
    supported_version: str


class PlatformRecommendations(BaseModel):
    """Advisory dataset rendered alongside the sizing output."""

    software: list[SoftwareRecommendation] = Field(default_factory=list)
    browsers: list[BrowserRecommendation] = Field(default_factory=list)


class PlatformRecommendationRepository:
    """Repository for platform recommendations."""

    def __init__(self, data_path: Path | None = None):
        """
        Initialize platform recommendation repository.

        A custom file that cannot be read falls back to the packaged defaults.

        Args:
            data_path: Path to an admin-maintained platform_recommendations.json
        """
        self.data_path = Path(data_path) if data_path else DEFAULT_DATA_PATH
        self._recommendations = self._load_data()

    def _load_data(self) -> PlatformRecommendations:
        """Load recommendations from JSON file."""
        if self.data_path != DEFAULT_DATA_PATH:
            try:
                return self._read(self.data_path)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning(
                    f"Failed to load platform recommendations from {self.data_path}: {e}. "
                    "Using packaged defaults"
                )

        try:
            return self._read(DEFAULT_DATA_PATH)
        except Exception as e:
            logger.error(f"Failed to load platform recommendations from {DEFAULT_DATA_PATH}: {e}")
            raise

    @staticmethod
    def _read(path: Path) -> PlatformRecommendations:
        with open(path) as f:
            recommendations = PlatformRecommendations.model_validate(json.load(f))
        logger.info(
            f"Loaded {len(recommendations.software)} software and "
            f"{len(recommendations.browsers)} browser recommendations"
        )
        return recommendations

    def get_recommendations(self) -> PlatformRecommendations:
        """Get the full recommendation dataset."""
        return self._recommendations

    def find_by_component(self, keyword: str) -> list[SoftwareRecommendation]:
        """
        Get software recommendations for a hosted component.

        Args:
            keyword: Case-insensitive substring of the hosted component (e.g., 'GPU')

        Returns:
            Matching software recommendations
        """
        keyword = keyword.lower()
        return [
            item
            for item in self._recommendations.software
            if keyword in item.component_hosted.lower()
        ]
