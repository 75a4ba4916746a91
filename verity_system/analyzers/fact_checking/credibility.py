"""Source credibility scoring.

Score = host baseline (known hosts) or source-type baseline, plus a
domain-suffix adjustment (.gov, .edu, ...) when the URL host is not a known
host, clamped to 0-100. The class floors/ceilings from config.scoring are
then applied: government sources never fall below the floor, encyclopedia
sources never rise above the ceiling.
"""

from typing import Dict, Optional
from urllib.parse import urlparse

from loguru import logger

from verity_system.config.scoring import CREDIBILITY_CEILINGS, CREDIBILITY_FLOORS
from verity_system.config.source_credibility import (
    DOMAIN_PATTERN_ADJUSTMENTS,
    SOURCE_BASELINES,
    SOURCE_TYPE_BASELINES,
)
from verity_system.data_management.schemas.claim_schema import Source, SourceType


class SourceCredibilityScorer:
    """Computes the trust weight used for a source in claim aggregation."""

    def __init__(
        self,
        type_baselines: Optional[Dict[str, float]] = None,
        host_baselines: Optional[Dict[str, float]] = None,
        floors: Optional[Dict[str, float]] = None,
        ceilings: Optional[Dict[str, float]] = None,
    ):
        self.type_baselines = type_baselines or SOURCE_TYPE_BASELINES
        self.host_baselines = host_baselines or SOURCE_BASELINES
        self.floors = CREDIBILITY_FLOORS if floors is None else floors
        self.ceilings = CREDIBILITY_CEILINGS if ceilings is None else ceilings
        self._logger = logger.bind(component="SourceCredibilityScorer")

    def base_score(self, source_type: SourceType, url: Optional[str] = None) -> float:
        """Baseline for a source before class floors/ceilings."""
        host = self._host(url)
        if host:
            for known, score in self.host_baselines.items():
                if host == known or host.endswith("." + known):
                    return score

        score = self.type_baselines.get(source_type.value, self.type_baselines.get("other", 50.0))
        if host:
            for suffix, adjustment in DOMAIN_PATTERN_ADJUSTMENTS.items():
                if host.endswith(suffix):
                    score += adjustment
                    break
        return max(0.0, min(100.0, score))

    def bound(self, source_type: SourceType, score: float) -> float:
        """Apply the class floor and ceiling to ``score``."""
        floor = self.floors.get(source_type.value)
        if floor is not None:
            score = max(score, floor)
        ceiling = self.ceilings.get(source_type.value)
        if ceiling is not None:
            score = min(score, ceiling)
        return max(0.0, min(100.0, score))

    def score(self, source: Source) -> float:
        """Effective weight for an already-built source.

        The source's own credibility_score is kept when set by the provider;
        the class floor/ceiling still applies.
        """
        return self.bound(source.source_type, source.credibility_score)

    def build_source(
        self,
        name: str,
        source_type: SourceType,
        url: Optional[str] = None,
    ) -> Source:
        score = self.bound(source_type, self.base_score(source_type, url))
        self._logger.debug(f"Scored {name} ({source_type.value}) at {score:.0f}")
        return Source(name=name, url=url, credibility_score=score, source_type=source_type)

    @staticmethod
    def _host(url: Optional[str]) -> str:
        if not url:
            return ""
        parsed = urlparse(url if "://" in url else f"https://{url}")
        host = (parsed.hostname or "").lower()
        return host[4:] if host.startswith("www.") else host
