"""Business-tunable metric constants and their resolution across sources."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from support_stats.taxonomy import ScoreGroup

logger = logging.getLogger(__name__)

# Automation score blend and quality bands as currently used by the dashboard.
# Pending product confirmation; override rather than edit.
DEFAULT_ACCURACY_WEIGHT = 0.7
DEFAULT_VOLUME_WEIGHT = 0.3
DEFAULT_QUALITY_GOOD_THRESHOLD = 61.0
DEFAULT_QUALITY_MEDIUM_THRESHOLD = 31.0
DEFAULT_ACCEPTABLE_SCORE_GROUPS = frozenset({ScoreGroup.GOOD, ScoreGroup.NEEDS_WORK})

ENV_PREFIX = "SUPPORT_STATS_"


@dataclass(frozen=True)
class MetricsSettings:
    accuracy_weight: float = DEFAULT_ACCURACY_WEIGHT
    volume_weight: float = DEFAULT_VOLUME_WEIGHT
    quality_good_threshold: float = DEFAULT_QUALITY_GOOD_THRESHOLD
    quality_medium_threshold: float = DEFAULT_QUALITY_MEDIUM_THRESHOLD
    acceptable_score_groups: frozenset[ScoreGroup] = DEFAULT_ACCEPTABLE_SCORE_GROUPS
    sources: Mapping[str, str] = field(default_factory=dict, compare=False)


DEFAULT_SETTINGS = MetricsSettings()


def maybe_load_dotenv() -> None:
    """Attempt to load environment variables from .env file."""
    try:
        from dotenv import load_dotenv
    except ImportError:
        logger.debug("python-dotenv not installed; skipping .env loading")
        return
    load_dotenv(override=False)


def _clean_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(str(value).strip())
    except ValueError:
        return None
    return None if math.isnan(out) else out


def _resolve_float(candidates: list[tuple[str, Any]], default: float) -> tuple[float, str]:
    for source, raw in candidates:
        value = _clean_float(raw)
        if value is not None:
            return value, source
    return default, "default"


def _resolve_groups(raw: Any) -> frozenset[ScoreGroup] | None:
    if raw is None:
        return None
    items = raw.split(",") if isinstance(raw, str) else raw
    groups: set[ScoreGroup] = set()
    for item in items:
        try:
            groups.add(ScoreGroup(str(getattr(item, "value", item)).strip()))
        except ValueError:
            return None
    return frozenset(groups) if groups else None


def resolve_metrics_settings(
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, Any] | None = None,
) -> MetricsSettings:
    """Resolve settings from explicit overrides, then ``SUPPORT_STATS_*`` env vars, then defaults.

    When ``env`` is omitted, ``os.environ`` is used after loading a ``.env``
    file if one exists. Values that do not parse fall through to the next source. ``sources``
    records where each value came from (``overrides`` / ``env`` / ``default``).
    """
    overrides_map = overrides if isinstance(overrides, Mapping) else {}
    if isinstance(env, Mapping):
        env_map = env
    else:
        maybe_load_dotenv()
        env_map = os.environ

    resolved: dict[str, Any] = {}
    sources: dict[str, str] = {}
    defaults = {
        "accuracy_weight": DEFAULT_ACCURACY_WEIGHT,
        "volume_weight": DEFAULT_VOLUME_WEIGHT,
        "quality_good_threshold": DEFAULT_QUALITY_GOOD_THRESHOLD,
        "quality_medium_threshold": DEFAULT_QUALITY_MEDIUM_THRESHOLD,
    }
    for key, default in defaults.items():
        value, source = _resolve_float(
            [
                ("overrides", overrides_map.get(key)),
                ("env", env_map.get(f"{ENV_PREFIX}{key.upper()}")),
            ],
            default,
        )
        resolved[key] = value
        sources[key] = source

    groups = _resolve_groups(overrides_map.get("acceptable_score_groups"))
    groups_source = "overrides"
    if groups is None:
        groups = _resolve_groups(env_map.get(f"{ENV_PREFIX}ACCEPTABLE_SCORE_GROUPS"))
        groups_source = "env"
    if groups is None:
        groups = DEFAULT_ACCEPTABLE_SCORE_GROUPS
        groups_source = "default"
    sources["acceptable_score_groups"] = groups_source

    return MetricsSettings(acceptable_score_groups=groups, sources=sources, **resolved)
