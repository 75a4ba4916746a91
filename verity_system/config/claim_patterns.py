"""Claim extraction pattern tables.

A sentence is a factual claim candidate when any FACTUAL_PATTERNS entry
matches it. Each entry names the claim family it signals so precision can
be measured per pattern.
"""

from typing import Dict, List, Tuple

# (name, regex) pairs; matched case-insensitively against one sentence
FACTUAL_PATTERNS: List[Tuple[str, str]] = [
    ("statistical_share", r"\b\d+(?:\.\d+)?\s*(?:%|percent|percentage)?\s+of\b"),
    ("statistical_value", r"\b(?:is|are|was|were)\s+\d+(?:\.\d+)?\s*(?:%|percent)?"),
    ("definitive", r"\b(?:always|never|all|none|every|must|shall|will|cannot)\b"),
    ("regulatory", r"\b(?:requires?|prohibits?|allows?|mandates?)\b"),
    ("comparative", r"\b(?:more|less|higher|lower|better|worse|faster|slower)\s+than\b"),
    ("trend", r"\b(?:increas|decreas|reduc|improv|worsen)(?:e|es|ed|ing|s)?\b"),
    ("causal", r"\b(?:causes?|prevents?|treats?|cures?|diagnoses?)\b"),
    ("assessment", r"\b(?:effective|ineffective|safe|unsafe|toxic|beneficial)\b"),
    ("conformance", r"\b(?:complies|comply|violates?|meets?|exceeds?)\b"),
    ("monetary", r"\b(?:costs?|saves?|earns?|loses?)\s+\$?\d"),
    ("coverage", r"\b(?:covers?|insures?|protects?)\b"),
    ("copula_fact", r"^\s*(?:the\s+)?[a-z][\w\s-]{0,40}?\b(?:is|are|was|were)\s+(?:a|an|the)\b"),
]

DOMAIN_KEYWORDS: Dict[str, List[str]] = {
    "healthcare": [
        "patient", "medical", "treatment", "diagnosis",
        "medication", "therapy", "clinical", "health",
    ],
    "financial": [
        "investment", "return", "profit", "loss", "revenue",
        "cost", "price", "market", "financial",
    ],
    "legal": [
        "contract", "agreement", "liability", "compliance",
        "regulation", "law", "legal", "court",
    ],
    "insurance": [
        "policy", "coverage", "claim", "premium",
        "deductible", "benefit", "risk", "insurance",
    ],
}

# Claim type signals (checked in order; first hit wins)
CLAIM_TYPE_SIGNALS: List[Tuple[str, str]] = [
    ("statistical", r"\d+(?:\.\d+)?\s*(?:%|percent)"),
    ("regulatory", r"\b(?:requires?|prohibits?|mandates?|regulation|law|compl(?:y|ies|iance))\b"),
    ("medical", r"\b(?:patient|treatment|diagnos\w*|medication|therapy|clinical|disease|risk of)\b"),
    ("financial", r"\b(?:revenue|profit|loss|investment|deposits?|price|market|\$)"),
]

ABSOLUTE_WORDS: List[str] = ["always", "never", "all", "none", "every", "completely", "entirely"]
MODAL_WORDS: List[str] = ["must", "shall", "will", "cannot", "required"]
HEDGE_WORDS: List[str] = ["might", "may", "could", "possibly", "perhaps", "likely", "probably"]
SEEMS_WORDS: List[str] = ["seems", "appears", "suggests"]

# A claim must contain at least one of these (or a word matching VERB_SUFFIX_PATTERN)
COMMON_VERBS: List[str] = [
    "is", "are", "was", "were", "be", "been", "has", "have", "had",
    "do", "does", "did", "will", "can", "must", "shall", "should",
    "requires", "require", "covers", "cover", "reduces", "reduce",
    "causes", "cause", "prevents", "prevent", "treats", "treat",
    "allows", "allow", "prohibits", "prohibit", "costs", "cost",
]
VERB_SUFFIX_PATTERN: str = r"\b\w{3,}(?:ed|es|ing)\b"

# Extraction confidence heuristic (0-100)
CLAIM_BASE_CONFIDENCE: float = 50.0
PERCENTAGE_BONUS: float = 20.0
ABSOLUTE_BONUS: float = 15.0
MODAL_BONUS: float = 15.0
DOMAIN_KEYWORD_BONUS: float = 5.0
HEDGE_PENALTY: float = 20.0
SEEMS_PENALTY: float = 15.0
CLAIM_CONFIDENCE_MIN: float = 10.0
CLAIM_CONFIDENCE_MAX: float = 95.0

MIN_CLAIM_LENGTH: int = 10
MAX_CLAIM_LENGTH: int = 500
