"""Entity and claim extraction.

Both extractors are pattern driven and return lazy, restartable streams:
- EntityExtractor: typed spans (emails, amounts, dates, regulations, ...)
- ClaimExtractor: sentences that read as checkable factual assertions
"""

from verity_system.analyzers.extraction.claim_extractor import ClaimExtractor
from verity_system.analyzers.extraction.entity_extractor import EntityExtractor
from verity_system.analyzers.extraction.segmentation import Sentence, split_sentences

__all__ = [
    "ClaimExtractor",
    "EntityExtractor",
    "Sentence",
    "split_sentences",
]
