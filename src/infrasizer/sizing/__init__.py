"""Sizing engine: metric derivation, component sizers and post-processing."""

from .engine import calculate_infra
from .sizers import ServerSizer

__all__ = ["ServerSizer", "calculate_infra"]
