"""Entity pattern table.

One entry per matcher, applied in order. Confidence is a fixed per-pattern
weight (0.0-1.0), not learned. ``ignore_case`` controls re.IGNORECASE.
"""

from typing import Any, Dict, List

ENTITY_PATTERNS: List[Dict[str, Any]] = [
    {
        "type": "email",
        "pattern": r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
        "confidence": 0.95,
        "ignore_case": False,
    },
    {
        "type": "phone",
        "pattern": r"(?:\+?1[-.\s]?)?\(?\b\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}\b",
        "confidence": 0.9,
        "ignore_case": False,
    },
    {
        "type": "url",
        "pattern": r"\bhttps?://[^\s<>\"']+[^\s<>\"'.,;:!?)]",
        "confidence": 0.95,
        "ignore_case": True,
    },
    {
        "type": "ssn",
        "pattern": r"\b\d{3}-\d{2}-\d{4}\b",
        "confidence": 0.9,
        "ignore_case": False,
    },
    {
        "type": "credit_card",
        "pattern": r"\b(?:\d{4}[-\s]?){3}\d{4}\b",
        "confidence": 0.8,
        "ignore_case": False,
    },
    {
        "type": "ip_address",
        "pattern": r"\b(?:(?:25[0-5]|2[0-4]\d|1?\d?\d)\.){3}(?:25[0-5]|2[0-4]\d|1?\d?\d)\b",
        "confidence": 0.9,
        "ignore_case": False,
    },
    {
        "type": "amount",
        "pattern": (
            r"[$€£¥]\s?\d{1,3}(?:,\d{3})*(?:\.\d+)?(?:\s?(?:million|billion|thousand|[MBK])\b)?"
            r"|\b\d{1,3}(?:,\d{3})*(?:\.\d+)?\s?(?:USD|EUR|GBP|dollars|euros)\b"
        ),
        "confidence": 0.85,
        "ignore_case": True,
    },
    {
        "type": "percentage",
        "pattern": r"\b\d+(?:\.\d+)?\s?(?:%|percent\b)",
        "confidence": 0.9,
        "ignore_case": True,
    },
    {
        "type": "date",
        "pattern": (
            r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"
            r"|\b\d{4}-\d{2}-\d{2}\b"
            r"|\b(?:January|February|March|April|May|June|July|August|September|"
            r"October|November|December)\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}\b"
            r"|\bQ[1-4]\s+\d{4}\b"
        ),
        "confidence": 0.9,
        "ignore_case": False,
    },
    {
        "type": "legal_entity",
        "pattern": (
            r"\b(?:[A-Z][A-Za-z&]+\s){1,4}(?:Inc|LLC|Ltd|Corp|Corporation|Co|LLP|PLC|GmbH)\b\.?"
        ),
        "confidence": 0.8,
        "ignore_case": False,
    },
    {
        "type": "medical_term",
        "pattern": (
            r"\b(?:diabetes|hypertension|cancer|asthma|diagnosis|prognosis|"
            r"prescription|medication|dosage|mg|chemotherapy|surgery|"
            r"[a-z]+itis|[a-z]+ectomy|[a-z]+ology)\b"
        ),
        "confidence": 0.7,
        "ignore_case": True,
    },
    {
        "type": "financial_instrument",
        "pattern": (
            r"\b(?:stocks?|bonds?|equity|equities|derivatives?|options?|futures|"
            r"securities|mutual funds?|ETFs?|treasur(?:y|ies))\b"
        ),
        "confidence": 0.6,
        "ignore_case": True,
    },
    {
        "type": "regulation",
        "pattern": r"\b(?:SEC|FDA|HIPAA|GDPR|SOX|Basel(?:\s+III)?|Dodd-Frank|MiFID(?:\s+II)?|CFTC|FINRA)\b",
        "confidence": 0.9,
        "ignore_case": False,
    },
    {
        "type": "insurance_term",
        "pattern": (
            r"\b(?:premium|deductible|copay|coinsurance|policyholder|underwriting|"
            r"claim denial|coverage|beneficiary|exclusion)\b"
        ),
        "confidence": 0.6,
        "ignore_case": True,
    },
    {
        "type": "person",
        "pattern": r"\b(?:(?:Mr|Mrs|Ms|Dr|Prof)\.?\s)?[A-Z][a-z]+\s[A-Z][a-z]+\b",
        "confidence": 0.6,
        "ignore_case": False,
    },
    {
        "type": "organization",
        "pattern": (
            r"\b(?:[A-Z][A-Za-z]+\s){0,3}(?:Bank|Hospital|University|Institute|Agency|"
            r"Department|Commission|Association|Group|Clinic|Foundation)\b"
        ),
        "confidence": 0.7,
        "ignore_case": False,
    },
]

# Characters of context kept on each side of an entity match
ENTITY_CONTEXT_RADIUS: int = 50
