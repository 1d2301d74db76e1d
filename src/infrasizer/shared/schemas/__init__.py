"""Shared Pydantic schemas for the InfraSizer engine.

This module provides all data schemas used across the application,
organized by domain:
- workload: sizing request, workload inputs, component selection, deployment context
- config: tuning table (thresholds, base specs, multipliers)
- result: server specifications and calculation results
"""

from .config import ConfigTable, ResourceSpec
from .result import (
    AcceleratorSpec,
    ApplicationMetrics,
    BotMetrics,
    CalculationResult,
    CloudCostEstimate,
    Component,
    LoadTier,
    NetworkZone,
    ServerRole,
    ServerSpec,
)
from .workload import (
    ApplicationLoad,
    BotLoad,
    BotMode,
    ComponentSelection,
    DeploymentContext,
    DeploymentModel,
    Environment,
    Industry,
    SizingRequest,
    WorkloadInput,
)

__all__ = [
    # Workload schemas
    "ApplicationLoad",
    "BotLoad",
    "BotMode",
    "ComponentSelection",
    "DeploymentContext",
    "DeploymentModel",
    "Environment",
    "Industry",
    "SizingRequest",
    "WorkloadInput",
    # Config schemas
    "ConfigTable",
    "ResourceSpec",
    # Result schemas
    "AcceleratorSpec",
    "ApplicationMetrics",
    "BotMetrics",
    "CalculationResult",
    "CloudCostEstimate",
    "Component",
    "LoadTier",
    "NetworkZone",
    "ServerRole",
    "ServerSpec",
]
