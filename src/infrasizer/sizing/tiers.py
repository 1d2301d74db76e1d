"""Threshold classification and resource scaling helpers shared by the sizers."""

import math

from ..shared.schemas import LoadTier, ResourceSpec
from ..shared.schemas.config import ApplicationThresholds, ResourceFloor, TierSpecs


def classify_load_tier(
    metrics: tuple[float, ...],
    low_to_medium: tuple[float, ...],
    medium_to_high: tuple[float, ...],
) -> LoadTier:
    """
    Classify load against two ordered threshold sets.

    A metric exceeding its boundary is enough to move up a tier (OR across
    metrics).

    Args:
        metrics: Observed values, e.g. (triggers/sec, named users)
        low_to_medium: Lower boundaries, same order as metrics
        medium_to_high: Upper boundaries, same order as metrics

    Returns:
        LoadTier.HIGH, LoadTier.MEDIUM or LoadTier.LOW
    """
    if any(value > limit for value, limit in zip(metrics, medium_to_high)):
        return LoadTier.HIGH
    if any(value > limit for value, limit in zip(metrics, low_to_medium)):
        return LoadTier.MEDIUM
    return LoadTier.LOW


def classify_application_tier(
    triggers_per_sec: float, users: int, thresholds: ApplicationThresholds
) -> LoadTier:
    """Tier of an application component from its triggers/sec and concurrent users."""
    return classify_load_tier(
        (triggers_per_sec, users),
        (thresholds.low_to_medium.triggers_per_sec, thresholds.low_to_medium.named_users),
        (thresholds.medium_to_high.triggers_per_sec, thresholds.medium_to_high.named_users),
    )


def spec_for_tier(specs: TierSpecs, tier: LoadTier) -> ResourceSpec:
    """Base resource tuple of a Low / Medium / High tier."""
    if tier == LoadTier.HIGH:
        return specs.high
    if tier == LoadTier.MEDIUM:
        return specs.medium
    return specs.low


def next_power_of_two(value: int, minimum: int = 4) -> int:
    """Round up to a realistic core-count SKU (power of two, at least ``minimum``)."""
    value = max(value, minimum, 1)
    return 1 << (value - 1).bit_length()


def scale_resources(
    base: ResourceSpec,
    multiplier: float,
    floor: ResourceFloor | None = None,
    power_of_two: bool = False,
    scale_storage: bool = True,
) -> tuple[int, int, int]:
    """
    Apply the environment multiplier, then floors, then CPU rounding.

    Args:
        base: Tier resource tuple from the config table
        multiplier: Environment scaling factor
        floor: Minimum cpu/ram enforced after scaling
        power_of_two: Round CPU up to the next power of two
        scale_storage: Whether storage is scaled along with cpu and ram

    Returns:
        (cpu cores, ram GB, storage GB)
    """
    cpu = math.ceil(base.cpu * multiplier)
    ram = math.ceil(base.ram * multiplier)
    hdd = math.ceil(base.hdd * multiplier) if scale_storage else math.ceil(base.hdd)

    if floor is not None:
        cpu = max(cpu, math.ceil(floor.cpu))
        ram = max(ram, math.ceil(floor.ram))

    if power_of_two:
        cpu = next_power_of_two(cpu)

    return cpu, ram, hdd
