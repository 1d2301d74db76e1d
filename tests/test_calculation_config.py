"""Tests for config resolution and the knowledge-base repositories."""

import json
import logging

import pytest
from pydantic import ValidationError

from infrasizer.knowledge_base import (
    CalculationConfigRepository,
    PlatformRecommendationRepository,
    get_calculation_config,
    resolve_config,
)
from infrasizer.shared.schemas import ConfigTable, Environment
from infrasizer.shared.schemas.config import ApplicationThresholds, ScalarThresholds, ThresholdPair


class TestResolveConfig:
    """Tests for resolve_config fallbacks."""

    @pytest.mark.parametrize("raw", [None, {}, [], "not a config", 42])
    def test_unusable_input_gives_defaults(self, raw):
        assert resolve_config(raw) == ConfigTable()

    def test_camel_and_snake_keys(self):
        camel = resolve_config({"crmStorageFactor": 2.0, "haUatConcurrentUsers": 10})
        snake = resolve_config({"crm_storage_factor": 2.0, "ha_uat_concurrent_users": 10})

        assert camel == snake
        assert camel.crm_storage_factor == 2.0
        assert camel.ha_uat_concurrent_users == 10

    def test_partial_section_keeps_other_defaults(self):
        config = resolve_config({"envMultipliers": {"DEV": 0.5, "UAT": 1.0, "PROD": 2.0}})

        assert config.multiplier_for(Environment.PROD) == 2.0
        assert config.crm_specs == ConfigTable().crm_specs

    def test_missing_environment_uses_builtin_multiplier(self):
        config = resolve_config({"envMultipliers": {"PROD": 2.0}})

        assert config.multiplier_for(Environment.DEV) == 0.8
        assert config.multiplier_for(Environment.UAT) == 1.0

    @pytest.mark.parametrize("key", ["envMultipliers", "env_multipliers"])
    def test_invalid_section_dropped(self, key, caplog):
        raw = {key: {"PROD": -1}, "crmStorageFactor": 3.0}

        with caplog.at_level(logging.WARNING):
            config = resolve_config(raw)

        assert config.env_multipliers == ConfigTable().env_multipliers
        assert config.crm_storage_factor == 3.0
        assert "invalid sections" in caplog.text

    def test_unknown_keys_ignored(self):
        assert resolve_config({"somethingElse": {"a": 1}}) == ConfigTable()

    def test_config_is_immutable(self):
        config = resolve_config(None)
        with pytest.raises(ValidationError):
            config.crm_storage_factor = 5.0

    def test_nested_sections_are_immutable(self):
        config = get_calculation_config()

        with pytest.raises(TypeError):
            config.env_multipliers["PROD"] = 10.0
        with pytest.raises(ValidationError):
            config.env_multipliers.prod = 10.0
        with pytest.raises(TypeError):
            config.gpu_worker.accelerators["high"] = None
        with pytest.raises(ValidationError):
            config.gpu_worker.accelerators.high = config.gpu_worker.accelerators.average

        assert config.multiplier_for(Environment.PROD) == 1.5
        assert config.gpu_worker.accelerators.high.type == "NVIDIA H100"

    def test_snake_case_environment_keys(self):
        config = resolve_config({"env_multipliers": {"dev": 0.5, "uat": 1.0, "prod": 2.5}})

        assert config.multiplier_for(Environment.DEV) == 0.5
        assert config.multiplier_for(Environment.PROD) == 2.5

    def test_inverted_thresholds_fall_back(self):
        raw = {
            "crmThresholds": {
                "lowToMedium": {"triggersPerSec": 100, "namedUsers": 3000},
                "mediumToHigh": {"triggersPerSec": 10, "namedUsers": 300},
            },
            "botThresholds": {"lowToMedium": 30000, "mediumToHigh": 20000},
            "crmStorageFactor": 3.0,
        }

        config = resolve_config(raw)

        assert config.crm_thresholds == ConfigTable().crm_thresholds
        assert config.bot_thresholds == ConfigTable().bot_thresholds
        assert config.crm_storage_factor == 3.0

    def test_threshold_order_validated(self):
        with pytest.raises(ValidationError):
            ApplicationThresholds(
                low_to_medium=ThresholdPair(triggers_per_sec=10, named_users=500),
                medium_to_high=ThresholdPair(triggers_per_sec=100, named_users=400),
            )
        with pytest.raises(ValidationError):
            ScalarThresholds(low_to_medium=201, medium_to_high=200)

        equal = ScalarThresholds(low_to_medium=200, medium_to_high=200)
        assert equal.low_to_medium == equal.medium_to_high


class TestCalculationConfigRepository:
    """Tests for the JSON-backed config repository."""

    def test_packaged_config_matches_defaults(self):
        assert CalculationConfigRepository().get_config() == ConfigTable()

    def test_cached_default_snapshot(self):
        assert get_calculation_config() is get_calculation_config()
        assert get_calculation_config() == ConfigTable()

    def test_missing_file_falls_back(self, tmp_path):
        repo = CalculationConfigRepository(tmp_path / "absent.json")
        assert repo.get_config() == ConfigTable()

    def test_corrupt_file_falls_back(self, tmp_path):
        path = tmp_path / "calculation_config.json"
        path.write_text("{not json")

        assert CalculationConfigRepository(path).get_config() == ConfigTable()

    def test_custom_file_loaded(self, tmp_path):
        path = tmp_path / "calculation_config.json"
        path.write_text(json.dumps({"rocketChat": {"userThreshold": 10}}))

        config = CalculationConfigRepository(path).get_config()

        assert config.rocket_chat.user_threshold == 10
        assert config.rocket_chat.standard == ConfigTable().rocket_chat.standard


class TestPlatformRecommendationRepository:
    """Tests for the platform recommendation dataset."""

    @pytest.fixture
    def repo(self):
        return PlatformRecommendationRepository()

    def test_packaged_data(self, repo):
        recommendations = repo.get_recommendations()

        assert len(recommendations.software) == 10
        assert len(recommendations.browsers) == 4

    def test_find_by_component(self, repo):
        gpu = repo.find_by_component("gpu")

        assert len(gpu) == 1
        assert gpu[0].component_hosted == "R-Yabot GPU Worker"
        assert len(repo.find_by_component("DATABASE")) == 2

    def test_bad_custom_file_falls_back(self, tmp_path):
        path = tmp_path / "platform_recommendations.json"
        path.write_text(json.dumps({"software": [{"software": "x"}]}))

        repo = PlatformRecommendationRepository(path)

        assert len(repo.get_recommendations().software) == 10

    def test_custom_file_loaded(self, tmp_path):
        path = tmp_path / "platform_recommendations.json"
        path.write_text(
            json.dumps({"browsers": [{"browser": "Chrome", "supportedVersion": "130+"}]})
        )

        recommendations = PlatformRecommendationRepository(path).get_recommendations()

        assert recommendations.software == []
        assert recommendations.browsers[0].supported_version == "130+"
