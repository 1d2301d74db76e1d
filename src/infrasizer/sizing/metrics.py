"""Derived load metrics from raw workload inputs."""

import math

from ..shared.schemas import ApplicationLoad, ApplicationMetrics, BotLoad, BotMetrics


def active_users(load: ApplicationLoad) -> int:
    """Concurrent users: ceil(named users * concurrency rate / 100)."""
    return math.ceil(load.named_users * load.concurrency_rate / 100)


def triggers_per_second(load: ApplicationLoad) -> float:
    """Unrounded triggers/sec generated by the concurrent users."""
    return active_users(load) * load.triggers_per_minute / 60


def application_metrics(load: ApplicationLoad) -> ApplicationMetrics:
    """
    Derive reported metrics for an application component.

    Args:
        load: Named users, concurrency rate and trigger rate

    Returns:
        ApplicationMetrics with triggers/sec rounded to 2 decimals
    """
    return ApplicationMetrics(
        triggers_per_second=round(triggers_per_second(load), 2),
        active_load_users=active_users(load),
    )


def bot_metrics(load: BotLoad) -> BotMetrics:
    """Requests/min and tokens/min of the conversational-AI component."""
    rpm = load.active_users * load.requests_per_minute
    return BotMetrics(requests_per_minute=rpm, tpm=rpm * load.avg_tokens_per_request)
