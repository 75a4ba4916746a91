"""Passage-level evidence assessment shared by knowledge sources.

A passage is evidence for a claim when its best-matching sentence covers at
least EVIDENCE_MIN_OVERLAP of the claim's content words. That sentence then
supports the claim, unless its polarity differs (one negated, the other
not) or it uses the antonym of a claim predicate, in which case it
contradicts the claim.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from verity_system.analyzers.extraction.segmentation import (
    content_words,
    is_negated,
    split_sentences,
    strip_negation,
    tokenize,
)
from verity_system.config.logic_lexicon import ANTONYM_PAIRS
from verity_system.config.scoring import EVIDENCE_MIN_OVERLAP


@dataclass(frozen=True)
class PassageAssessment:
    """How one passage bears on one claim."""

    overlap: float
    sentence: str = ""
    supports: bool = False
    contradicts: bool = False

    @property
    def is_evidence(self) -> bool:
        return self.supports or self.contradicts


def claim_terms(statement: str) -> Set[str]:
    return set(content_words(strip_negation(tokenize(statement)), min_length=3))


def _opposes(claim_tokens: Set[str], sentence_tokens: Set[str]) -> bool:
    for word_a, word_b in ANTONYM_PAIRS:
        if word_a in claim_tokens and word_b in sentence_tokens and word_b not in claim_tokens:
            return True
        if word_b in claim_tokens and word_a in sentence_tokens and word_a not in claim_tokens:
            return True
    return False


def assess_passage(
    statement: str,
    passage: str,
    min_overlap: float = EVIDENCE_MIN_OVERLAP,
) -> PassageAssessment:
    """Assess ``passage`` as evidence about ``statement``."""
    terms = claim_terms(statement)
    if not terms or not passage:
        return PassageAssessment(overlap=0.0)

    candidates = [s.text for s in split_sentences(passage, min_length=0)] or [passage]
    best: Optional[str] = None
    best_overlap = 0.0
    for candidate in candidates:
        overlap = len(terms & claim_terms(candidate)) / len(terms)
        if overlap > best_overlap:
            best, best_overlap = candidate, overlap

    if best is None or best_overlap < min_overlap:
        return PassageAssessment(overlap=best_overlap)

    claim_tokens = tokenize(statement)
    best_tokens = tokenize(best)
    contradicts = (
        is_negated(claim_tokens) != is_negated(best_tokens)
        or _opposes(set(claim_tokens), set(best_tokens))
    )
    return PassageAssessment(
        overlap=best_overlap,
        sentence=best,
        supports=not contradicts,
        contradicts=contradicts,
    )


def assess_passages(statement: str, passages: Sequence[str]) -> List[PassageAssessment]:
    """Assess every passage, keeping only those that count as evidence."""
    assessments = [assess_passage(statement, p) for p in passages]
    return [a for a in assessments if a.is_evidence]
