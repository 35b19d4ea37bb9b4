from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from shared.models import AMPLITUDE_MAX_VALUE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorSettings:
    """Tuning constants for the decode → normalize → detect pipeline.

    Durations and windows are in raw sample ticks; amplitudes are in raw
    16-bit units.
    """

    # raw samples averaged into one normalized sample
    block_size: int = 10
    # |amplitude| an interrupt must exceed (50% of max)
    threshold: int = AMPLITUDE_MAX_VALUE // 2
    # normalized samples to look back when measuring the start slope
    slope_lookback: int = 6
    # minimum rise/fall over the lookback to start an interrupt (25% of max)
    min_slope_delta: int = AMPLITUDE_MAX_VALUE // 4
    min_duration: int = 20
    max_duration: int = 4000
    # time the amplitude must stay under threshold for an interrupt to end
    confirm_window: int = 10
    # normalized samples carried into the next call for look-back checks
    backfill_window: int = 10
    # consecutive interrupts must be on opposite sides of zero
    require_alternation: bool = True

    def validate(self) -> None:
        if self.block_size <= 0:
            raise ValueError("block_size must be positive")
        if not (0 < self.threshold <= AMPLITUDE_MAX_VALUE):
            raise ValueError(f"threshold must be between 1 and {AMPLITUDE_MAX_VALUE}")
        if self.slope_lookback <= 0:
            raise ValueError("slope_lookback must be positive")
        if self.min_slope_delta < 0:
            raise ValueError("min_slope_delta must be non-negative")
        if self.min_duration < 0:
            raise ValueError("min_duration must be non-negative")
        if self.max_duration <= self.min_duration:
            raise ValueError("max_duration must exceed min_duration")
        if self.confirm_window < 0:
            raise ValueError("confirm_window must be non-negative")
        if self.backfill_window < self.slope_lookback:
            raise ValueError("backfill_window must cover slope_lookback")

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DetectorSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown detector settings: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {}
        for name, value in data.items():
            if name == "require_alternation":
                kwargs[name] = bool(int(value)) if isinstance(value, str) else bool(value)
            else:
                kwargs[name] = _as_int(name, value)
        settings = cls(**kwargs)
        settings.validate()
        return settings


def _as_int(name: str, value: Any) -> int:
    # 20.0 is accepted, 20.7 and True are not
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def load_settings(path: str | Path) -> DetectorSettings:
    """Read settings from a JSON object file. Missing keys keep their defaults."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    settings = DetectorSettings.from_dict(data)
    logger.debug("Loaded detector settings from %s: %s", path, settings)
    return settings


def save_settings(settings: DetectorSettings, path: str | Path) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".json":
        path = path.with_suffix(".json")
    path.write_text(json.dumps(settings.to_dict(), indent=2))
    return path


__all__ = ["DetectorSettings", "load_settings", "save_settings"]
