"""Readership report models.

`ReportConfig` is the user-authored filter definition loaded with the settings.
`Report` owns the per-key hit statistics for one `ReportConfig` during a run.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from readmetrikks.services.classifier.classifier import Hit


PATH_TEST = "path"
REGEX_TEST_TYPES = ("path_regex", "referer_regex", "agent_regex")


class ReportConfig(BaseModel):
    """A single report filter.

    `test_type` is a plain string. Unknown types load but never match.
    """

    label: str = Field(description="Display name of the report")
    test_type: str = Field(
        description="One of path, path_regex, referer_regex, agent_regex",
    )
    test: str = Field(description="Literal path or free-spacing regular expression")

    @model_validator(mode="after")
    def validate_regex(self) -> "ReportConfig":
        """Ensure regex tests compile."""
        if self.test_type in REGEX_TEST_TYPES:
            try:
                re.compile(self.test, re.VERBOSE)
            except re.error as e:
                raise ValueError(f"Invalid regular expression for report '{self.label}': {e}") from e
        return self


@dataclass
class HitStats:
    """Visit statistics for one hit key."""

    count: int
    earliest: datetime
    latest: datetime

    @property
    def elapsed_seconds(self) -> float:
        """Absolute span between the first and last observation."""
        return abs((self.latest - self.earliest).total_seconds())


@dataclass
class Report:
    """One configured report and the readership accumulated for it."""

    config: ReportConfig
    hits: dict[str, HitStats] = field(default_factory=dict)
    total: int = 0
    regular_total: int = 0

    @property
    def label(self) -> str:
        return self.config.label

    def record_hit(self, hit: "Hit", timestamp: datetime) -> None:
        """Fold a matched hit into the key's statistics.

        Records arrive newest-first, so the first observation of a key fixes
        `latest` and every later one moves `earliest` further into the past.
        `count` is overwritten with the weight of each hit, never summed.
        """
        stats = self.hits.get(hit.key)
        if stats is None:
            self.hits[hit.key] = HitStats(count=hit.weight, earliest=timestamp, latest=timestamp)
            return
        stats.earliest = timestamp
        stats.count = hit.weight
