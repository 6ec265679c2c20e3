"""Scoring configuration.

:class:`ScoringConfig` carries every tunable number the scorer uses. The
defaults reproduce the reference weights and thresholds; overrides are loaded
from JSON by the CLI (``--config``). Nothing here reads the environment.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

_UNIT = {"ge": 0.0, "le": 1.0}


class ScoringConfig(BaseModel):
    """Signal weights, z-score brackets and classification thresholds."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Score deltas per signal
    strong_outlier_weight: float = Field(0.40, **_UNIT)
    moderate_outlier_weight: float = Field(0.20, **_UNIT)
    rare_vendor_weight: float = Field(0.25, **_UNIT)
    weekend_weight: float = Field(0.10, **_UNIT)
    duplicate_weight: float = Field(0.40, **_UNIT)

    # z > strong_z -> strong bracket; moderate_z < z <= strong_z -> moderate
    strong_z: float = Field(3.0, gt=0.0)
    moderate_z: float = Field(2.0, gt=0.0)

    # Rare vendor: count within category <= max, category size > min
    rare_vendor_max_count: int = Field(1, ge=0)
    rare_vendor_min_category_size: int = Field(5, ge=0)

    anomalous_threshold: float = Field(0.70, **_UNIT)
    suspicious_threshold: float = Field(0.30, **_UNIT)

    @model_validator(mode="after")
    def _check_ordering(self) -> ScoringConfig:
        if self.moderate_z >= self.strong_z:
            raise ValueError("moderate_z must be lower than strong_z")
        if self.suspicious_threshold > self.anomalous_threshold:
            raise ValueError("suspicious_threshold must not exceed anomalous_threshold")
        return self

    @classmethod
    def from_json_file(cls, path: str | PathLike[str]) -> ScoringConfig:
        """Load overrides from a JSON object; omitted keys keep their defaults."""

        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


DEFAULT_CONFIG = ScoringConfig()


__all__ = ["DEFAULT_CONFIG", "ScoringConfig"]
