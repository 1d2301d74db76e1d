"""Tabular views of sizing results for report exporters.

Exporters write these frames to spreadsheets or PDFs; this module only builds
them. Multi-environment reports re-invoke the engine once per tier.
"""

import logging

import pandas as pd

from ..knowledge_base.platform_recommendations import PlatformRecommendations
from ..shared.schemas import (
    CalculationResult,
    ConfigTable,
    Environment,
    ServerSpec,
    SizingRequest,
)
from ..sizing.engine import calculate_infra
from ..sizing.metrics import active_users, triggers_per_second
from ..sizing.tiers import classify_application_tier

logger = logging.getLogger(__name__)

SERVER_COLUMNS = [
    "Server Name",
    "Specification",
    "CPU",
    "RAM",
    "Storage (HDD)",
    "OS",
    "Load Category",
    "Network Zone",
    "GPU",
    "DR",
    "Notes",
]


def servers_to_frame(servers: list[ServerSpec]) -> pd.DataFrame:
    """One row per server in the export column layout."""
    rows = [
        [
            s.name,
            s.specification,
            s.cpu,
            s.ram,
            s.hdd,
            s.os,
            s.load_category.value,
            s.network_zone.value,
            f"{s.gpu.type} ({s.gpu.memory})" if s.gpu else "N/A",
            "Yes" if s.dr_enabled else "No",
            s.additional_notes or "",
        ]
        for s in servers
    ]
    return pd.DataFrame(rows, columns=SERVER_COLUMNS)


def load_metrics_frame(
    request: SizingRequest, result: CalculationResult, config: ConfigTable | None = None
) -> pd.DataFrame:
    """
    Build the "server load calculation" metric/value table.

    Args:
        request: Request the result was computed from
        result: Engine output
        config: Config table used for the CRM tier classification (defaults if None)

    Returns:
        DataFrame with Metric and Value columns
    """
    config = config or ConfigTable()
    workload = request.workload
    crm_tier = classify_application_tier(
        triggers_per_second(workload.crm), active_users(workload.crm), config.crm_thresholds
    )
    context = request.context

    rows = [
        ("Named Users", workload.crm.named_users),
        ("Concurrency Rate (%)", workload.crm.concurrency_rate),
        ("Triggers Per Minute (per user session)", workload.crm.triggers_per_minute),
        ("Concurrent / Active Users", active_users(workload.crm)),
        ("Triggers Per Second", result.crm_metrics.triggers_per_second),
        ("Load Tier Classification", crm_tier.value),
        ("Concurrent Bot Users", workload.bot.active_users),
        ("Requests Per User/Min", workload.bot.requests_per_minute),
        ("Avg Tokens Per Request", workload.bot.avg_tokens_per_request),
        ("Total Requests/Min (RPM)", result.bot_metrics.requests_per_minute),
        ("Tokens Per Minute (TPM)", result.bot_metrics.tpm),
        ("R-Yabot Deployment Mode", context.bot_mode.value),
        ("Raw Data Volume (GB/month)", workload.data_volume_gb),
        ("Environment Multiplier", config.multiplier_for(context.environment)),
        ("Total Server Nodes", len(result.servers)),
    ]
    return pd.DataFrame(rows, columns=["Metric", "Value"])


def calculate_environments(
    request: SizingRequest,
    config: ConfigTable | None = None,
    environments: tuple[Environment, ...] = (Environment.PROD, Environment.UAT),
) -> dict[Environment, CalculationResult]:
    """
    Invoke the engine once per environment tier.

    Args:
        request: Base request; its environment is overridden per tier
        config: Config table shared by every invocation
        environments: Tiers to size, in report order

    Returns:
        Mapping of environment to its CalculationResult
    """
    results = {}
    for environment in environments:
        results[environment] = calculate_infra(request.for_environment(environment), config)
    logger.info(f"Calculated {len(results)} environment tiers")
    return results


def environment_comparison_frame(results: dict[Environment, CalculationResult]) -> pd.DataFrame:
    """Node count and total cores / RAM / storage per environment tier."""
    rows = []
    for environment, result in results.items():
        rows.append(
            {
                "Environment": environment.value,
                "Server Nodes": len(result.servers),
                "Total CPU Cores": sum(s.cpu_cores for s in result.servers),
                "Total RAM (GB)": sum(s.ram_gb for s in result.servers),
                "Total Storage (GB)": sum(s.storage_gb for s in result.servers),
                "GPU Nodes": sum(1 for s in result.servers if s.gpu),
            }
        )
    return pd.DataFrame(rows)


def platform_recommendations_frames(
    recommendations: PlatformRecommendations,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Software and browser support tables.

    Returns:
        Tuple of (software frame, browser frame)
    """
    software = pd.DataFrame(
        [
            [s.software, s.supported_version, s.component_hosted, s.comments]
            for s in recommendations.software
        ],
        columns=["Software", "Supported Version", "Component Hosted", "Comments"],
    )
    browsers = pd.DataFrame(
        [[b.browser, b.supported_version] for b in recommendations.browsers],
        columns=["Browser", "Supported Version"],
    )
    return software, browsers
