"""Resolution of the calculation config table.

The admin-maintained configuration is an opaque JSON document. Anything
missing or malformed is replaced by the built-in defaults of ``ConfigTable``;
configuration problems are logged, never raised.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ..shared.schemas import ConfigTable

logger = logging.getLogger(__name__)


def resolve_config(raw: Any) -> ConfigTable:
    """
    Build a ConfigTable from a raw config snapshot.

    Sections that are absent keep their defaults. Sections that fail
    validation are dropped (and so also fall back to defaults).

    Args:
        raw: Parsed JSON document (camelCase or snake_case keys), or None

    Returns:
        Fully-populated ConfigTable
    """
    if not raw:
        return ConfigTable()
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring calculation config of type {type(raw).__name__}, using defaults")
        return ConfigTable()

    try:
        return ConfigTable.model_validate(raw)
    except ValidationError as e:
        invalid = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        logger.warning(
            f"Calculation config has invalid sections {sorted(invalid)}, using defaults for them"
        )

    cleaned = {
        key: value
        for key, value in raw.items()
        if key not in invalid and to_camel(key) not in invalid
    }
    try:
        return ConfigTable.model_validate(cleaned)
    except ValidationError as e:
        logger.warning(f"Calculation config could not be repaired, using defaults: {e}")
        return ConfigTable()


class CalculationConfigRepository:
    """Repository for the calculation config table."""

    def __init__(self, data_path: Path | None = None):
        """
        Initialize calculation config repository.

        Args:
            data_path: Path to calculation_config.json
        """
        if data_path is None:
            data_path = Path(__file__).parent.parent / "data" / "calculation_config.json"

        self.data_path = Path(data_path)
        self._config = self._load_data()

    def _load_data(self) -> ConfigTable:
        """Load the config table from JSON, falling back to defaults."""
        try:
            with open(self.data_path) as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Calculation config not found at {self.data_path}, using defaults")
            return ConfigTable()
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read calculation config from {self.data_path}: {e}")
            return ConfigTable()

        config = resolve_config(raw)
        logger.info(f"Loaded calculation config from {self.data_path}")
        return config

    def get_config(self) -> ConfigTable:
        """Get the resolved config table."""
        return self._config


# Singleton default snapshot
_default_repo: CalculationConfigRepository | None = None


def get_calculation_config() -> ConfigTable:
    """Get the calculation config shipped with the package (cached)."""
    global _default_repo
    if _default_repo is None:
        _default_repo = CalculationConfigRepository()
    return _default_repo.get_config()
