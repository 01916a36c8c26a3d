"""
Configuration for traced shortest-path runs.

Settings live in a small YAML file; every key is optional:

    path_updates: final        # or every_node
    channel_maxsize: 1024
    channel_poll_seconds: 0.05
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml


class PathUpdateMode(Enum):
    """
    When PathUpdated events are emitted.

    FINAL: once, when the target is settled.
    EVERY_NODE: also after every settled node, describing the path to it.
    """

    FINAL = "final"
    EVERY_NODE = "every_node"


@dataclass(frozen=True)
class TraceConfig:
    path_updates: PathUpdateMode = PathUpdateMode.FINAL
    channel_maxsize: int = 1024
    channel_poll_seconds: float = 0.05

    def __post_init__(self) -> None:
        if self.channel_maxsize < 1:
            raise ValueError("channel_maxsize must be at least 1")
        if self.channel_poll_seconds <= 0:
            raise ValueError("channel_poll_seconds must be positive")


def trace_config_from_mapping(data: Mapping[str, Any]) -> TraceConfig:
    defaults = TraceConfig()
    mode = data.get("path_updates", defaults.path_updates.value)
    try:
        path_updates = PathUpdateMode(mode)
    except ValueError:
        choices = ", ".join(m.value for m in PathUpdateMode)
        raise ValueError(f"Unknown path_updates mode {mode!r}; expected one of: {choices}") from None
    return TraceConfig(
        path_updates=path_updates,
        channel_maxsize=int(data.get("channel_maxsize", defaults.channel_maxsize)),
        channel_poll_seconds=float(data.get("channel_poll_seconds", defaults.channel_poll_seconds)),
    )


def load_trace_config(path: Path) -> TraceConfig:
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Trace config {path} must be a mapping")
    return trace_config_from_mapping(data)
