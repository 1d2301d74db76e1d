"""Reporting helpers: text summaries and tabular views of sizing results."""

from .summary import summarize_result
from .tables import (
    calculate_environments,
    environment_comparison_frame,
    load_metrics_frame,
    platform_recommendations_frames,
    servers_to_frame,
)

__all__ = [
    "calculate_environments",
    "environment_comparison_frame",
    "load_metrics_frame",
    "platform_recommendations_frames",
    "servers_to_frame",
    "summarize_result",
]
