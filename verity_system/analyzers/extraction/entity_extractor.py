"""Pattern-based entity extraction.

An ordered set of independent matchers, one per entity type, built from
config.entity_patterns. Matches are unioned across types (an SSN can also
be a phone-shaped number) and deduplicated within a type by (value, span).

A matcher that raises is logged and skipped; extraction as a whole never
fails.

Usage:
    extractor = EntityExtractor()
    for entity in extractor.extract(text):
        ...
    entities = extractor.extract_all(text)
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from loguru import logger

from verity_system.analyzers.extraction.segmentation import context_window
from verity_system.config.entity_patterns import ENTITY_CONTEXT_RADIUS, ENTITY_PATTERNS
from verity_system.data_management.schemas.content_schema import (
    EntityType,
    ExtractedEntity,
    TextLocation,
)


@dataclass(frozen=True)
class EntityMatcher:
    """One compiled entity pattern with its static confidence."""

    entity_type: EntityType
    regex: re.Pattern
    confidence: float

    @classmethod
    def from_config(cls, entry: Dict[str, Any]) -> "EntityMatcher":
        flags = re.IGNORECASE if entry.get("ignore_case") else 0
        return cls(
            entity_type=EntityType(entry["type"]),
            regex=re.compile(entry["pattern"], flags),
            confidence=float(entry["confidence"]),
        )


class EntityStream:
    """Lazy, restartable sequence of entities for one text.

    Each iteration re-runs the matchers, so the stream can be consumed
    more than once.
    """

    def __init__(self, extractor: "EntityExtractor", text: str):
        self._extractor = extractor
        self._text = text

    def __iter__(self) -> Iterator[ExtractedEntity]:
        return self._extractor._iter_entities(self._text)


class EntityExtractor:
    """Extracts typed spans (dates, amounts, emails, regulations, ...) from text."""

    def __init__(
        self,
        patterns: Optional[Sequence[Dict[str, Any]]] = None,
        context_radius: int = ENTITY_CONTEXT_RADIUS,
    ):
        """
        Initialize the extractor.

        Args:
            patterns: Pattern table entries (defaults to config.entity_patterns)
            context_radius: Characters of context kept on each side of a match
        """
        self.context_radius = context_radius
        self._logger = logger.bind(component="EntityExtractor")
        self.matchers: List[EntityMatcher] = []
        for entry in patterns if patterns is not None else ENTITY_PATTERNS:
            try:
                self.matchers.append(EntityMatcher.from_config(entry))
            except (re.error, ValueError, KeyError) as e:
                self._logger.warning(f"Skipping invalid entity pattern {entry.get('type')}: {e}")

    def extract(self, text: str) -> EntityStream:
        """Return a lazy, restartable stream of entities found in ``text``."""
        return EntityStream(self, text or "")

    def extract_all(self, text: str) -> List[ExtractedEntity]:
        """Materialize every entity in ``text``, ordered by position then type."""
        entities = list(self.extract(text))
        entities.sort(key=lambda e: (e.location.start, e.location.end, e.type.value))
        return entities

    def _iter_entities(self, text: str) -> Iterator[ExtractedEntity]:
        if not text:
            return

        for matcher in self.matchers:
            seen = set()
            try:
                for match in matcher.regex.finditer(text):
                    value = match.group(0).strip()
                    if not value:
                        continue
                    start = match.start() + (len(match.group(0)) - len(match.group(0).lstrip()))
                    end = start + len(value)
                    key = (value, start, end)
                    if key in seen:
                        continue
                    seen.add(key)
                    yield ExtractedEntity(
                        type=matcher.entity_type,
                        value=value,
                        confidence=matcher.confidence,
                        location=TextLocation.from_span(text, start, end),
                        context=context_window(text, start, end, self.context_radius),
                    )
            except Exception as e:
                # One broken matcher must not take down the others
                self._logger.warning(
                    f"Entity matcher {matcher.entity_type.value} failed: {e}"
                )
                continue
