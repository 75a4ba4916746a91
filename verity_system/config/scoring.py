"""Tunable constants for every piece of confidence arithmetic.

These are calibration placeholders, not business rules. Components take
them as constructor defaults so tests and domain experts can pin or
override them without code changes.

Scales:
- Claim, source, violation and contradiction confidences: 0-100
- Issue confidence: 0.0-1.0
- Document overall confidence: 0-100
"""

from typing import Dict

# ── Fact checking ─────────────────────────────────────────────────────────

# Share of the claim verdict contributed by each evidence group
INTERNAL_WEIGHT: float = 0.6
EXTERNAL_WEIGHT: float = 0.4

# Confidence assigned to a claim nobody has an opinion on
UNVERIFIED_CLAIM_CONFIDENCE: float = 50.0

# Per-source "supported" thresholds (source confidence must exceed these)
SUPPORT_THRESHOLDS: Dict[str, float] = {
    "government": 70.0,
    "academic": 65.0,
    "encyclopedia": 60.0,
    "industry": 65.0,
    "internal": 70.0,
    "news": 65.0,
    "other": 70.0,
}

# Government sources are trusted at least this much regardless of reported credibility
CREDIBILITY_FLOORS: Dict[str, float] = {
    "government": 80.0,
}

# Encyclopedia sources never weigh more than this
CREDIBILITY_CEILINGS: Dict[str, float] = {
    "encyclopedia": 80.0,
}

# Claims at or below this confidence become high-severity factual errors
FACTUAL_HIGH_SEVERITY_BELOW: float = 40.0

# Minimum claim-term overlap for a passage to count as evidence at all
EVIDENCE_MIN_OVERLAP: float = 0.5

# ── Compliance ────────────────────────────────────────────────────────────

KEYWORD_MATCH_CONFIDENCE: float = 85.0
PATTERN_MATCH_CONFIDENCE: float = 90.0

# Compliance score penalty per violation, by severity
COMPLIANCE_SCORE_PENALTIES: Dict[str, float] = {
    "critical": 25.0,
    "high": 15.0,
    "medium": 8.0,
    "low": 3.0,
}

# ── Contradiction detection ───────────────────────────────────────────────

# Sentences compared only within the same subject bucket, this many back
CONTRADICTION_WINDOW: int = 10

NEGATION_SIMILARITY_THRESHOLD: float = 0.5
NEGATION_MIN_CONFIDENCE: float = 70.0
ANTONYM_CONTEXT_THRESHOLD: float = 0.3
ANTONYM_MIN_CONFIDENCE: float = 70.0
IMPLICIT_CONFIDENCE: float = 60.0
TEMPORAL_CONTRADICTION_CONFIDENCE: float = 65.0
# Direct contradictions never reach certainty from lexical evidence alone
CONTRADICTION_CONFIDENCE_CAP: float = 95.0

# ── Coherence validation ──────────────────────────────────────────────────

TOPIC_SHIFT_SIMILARITY: float = 0.05
TOPIC_SHIFT_MIN_WORDS: int = 4
TOPIC_SHIFT_CONFIDENCE: float = 50.0
SENTIMENT_TOPIC_SIMILARITY: float = 0.3
SENTIMENT_CONTRADICTION_CONFIDENCE: float = 70.0
SENTIMENT_WINDOW: int = 10
TEMPORAL_ORDER_CONFIDENCE: float = 70.0
EVENT_MATCH_SIMILARITY: float = 0.5
CAUSAL_CIRCULAR_CONFIDENCE: float = 80.0
REFERENCE_LOOKBACK_CHARS: int = 500
REFERENCE_ERROR_CONFIDENCE: float = 75.0
CONTEXT_RADIUS: int = 100

# ── Fallacy detection ─────────────────────────────────────────────────────

FALLACY_PATTERN_CONFIDENCE: float = 80.0
FALLACY_KEYWORD_CONFIDENCE: float = 60.0
# Keyword hits needed when a fallacy has no pattern match
FALLACY_MIN_KEYWORDS: int = 2
FALLACY_KEYWORD_BONUS: float = 5.0
FALLACY_SHORT_SENTENCE_CHARS: int = 50
FALLACY_SHORT_SENTENCE_PENALTY: float = 10.0
FALLACY_LONG_SENTENCE_CHARS: int = 200
FALLACY_LONG_SENTENCE_BONUS: float = 5.0
FALLACY_SEVERITY_ADJUSTMENT: Dict[str, float] = {"critical": 10.0, "high": 5.0, "low": -5.0}
FALLACY_MIN_CONFIDENCE: float = 30.0
FALLACY_MAX_CONFIDENCE: float = 95.0
# Same-type findings closer than this are one finding
FALLACY_DEDUP_CHARS: int = 50
FALLACY_MIN_SENTENCE_CHARS: int = 10

# ── Numerical consistency ─────────────────────────────────────────────────

CALCULATION_ERROR_CONFIDENCE: float = 95.0
PERCENTAGE_SUM_CONFIDENCE: float = 80.0
PERCENTAGE_SUM_TOLERANCE: float = 1.0
UNIT_MISMATCH_CONFIDENCE: float = 80.0
RANGE_VIOLATION_CONFIDENCE: float = 70.0
SUM_MISMATCH_CONFIDENCE: float = 75.0
# Absolute floor; the tolerance also scales to 0.1% of the stated total
SUM_MISMATCH_TOLERANCE: float = 0.01

# ── Aggregation ───────────────────────────────────────────────────────────

# Confidence points removed per issue at full issue confidence
SEVERITY_PENALTIES: Dict[str, float] = {
    "critical": 25.0,
    "high": 15.0,
    "medium": 8.0,
    "low": 3.0,
}

# Logical issues depress confidence less per issue than factual/compliance ones
ISSUE_TYPE_WEIGHTS: Dict[str, float] = {
    "compliance_violation": 1.0,
    "factual_error": 1.0,
    "logical_inconsistency": 0.6,
}

# Domains where errors cost more
DOMAIN_CONFIDENCE_WEIGHTS: Dict[str, float] = {
    "financial": 1.2,
    "healthcare": 1.1,
    "legal": 1.0,
    "insurance": 1.0,
}

# Diminishing returns: bucket = top * (1 + alpha * log10(1 + rest / top))
DIMINISHING_RETURNS_ALPHA: float = 1.0

# Confidence removed when an analyzer branch fails outright
MODULE_FAILURE_PENALTY: float = 10.0

# Confidence removed per failed sub-step of an analyzer that still completed
STEP_FAILURE_PENALTY: float = 5.0

MAX_CONFIDENCE: float = 100.0

# Confidence bands for risk (risk is at least this level below the bound)
RISK_CONFIDENCE_BANDS: Dict[str, float] = {
    "critical": 50.0,
    "high": 70.0,
    "medium": 85.0,
}

# ── Recommendations ───────────────────────────────────────────────────────

RECOMMENDATION_TEMPLATES: Dict[str, str] = {
    "factual_error": (
        "{count} factual error(s) detected. "
        "Review and verify against authoritative sources."
    ),
    "logical_inconsistency": (
        "{count} logical inconsistency(ies) found. "
        "Check for contradictions and ensure coherent reasoning."
    ),
    "compliance_violation": (
        "{count} compliance violation(s) identified. "
        "Consult with legal/compliance team before proceeding."
    ),
}

RISK_RECOMMENDATIONS: Dict[str, str] = {
    "critical": "CRITICAL: Do not use this content without thorough review and correction.",
    "high": "HIGH RISK: Significant issues detected. Manual review strongly recommended.",
    "medium": "MEDIUM RISK: Some issues detected. Consider review before use.",
}

NO_ISSUES_RECOMMENDATION = "Content appears to be accurate and compliant. No issues detected."

MODULE_FAILURE_RECOMMENDATION = (
    "{module} analysis failed; results may be incomplete. Re-run verification."
)

STEP_FAILURE_RECOMMENDATION = (
    "{step} check failed; results may be incomplete. Re-run verification."
)

# Per-source timeout multiplier by request urgency
URGENCY_TIMEOUT_FACTORS: Dict[str, float] = {
    "low": 1.5,
    "medium": 1.0,
    "high": 0.75,
    "critical": 0.5,
}
