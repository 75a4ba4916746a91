"""Default compliance rule set.

Rules are data: each entry is validated and registered by the rules
engine at startup. Patterns are matched case-insensitively; a scoped
``(?-i:...)`` group keeps part of a pattern case-sensitive.
"""

from typing import Any, Dict, List

DEFAULT_RULES: List[Dict[str, Any]] = [
    {
        "id": "hipaa-phi-001",
        "rule_text": "Protected Health Information (PHI) must not be disclosed without authorization",
        "regulation": "HIPAA",
        "jurisdiction": "US",
        "domain": "healthcare",
        "severity": "critical",
        "keywords": [
            "ssn",
            "social security",
            "patient",
            "diagnosis",
            "medical record",
            "health information",
        ],
        "patterns": [
            r"\b\d{3}-\d{2}-\d{4}\b",
            r"(?-i:\b[A-Z][a-z]+ [A-Z][a-z]+) (has|diagnosed with|suffers from)\b",
        ],
        "examples": ["John Smith has diabetes", "SSN: 123-45-6789"],
    },
    {
        "id": "sox-financial-001",
        "rule_text": "Financial statements must be accurate and internal controls must be documented",
        "regulation": "SOX",
        "jurisdiction": "US",
        "domain": "financial",
        "severity": "critical",
        "keywords": [
            "revenue",
            "profit",
            "loss",
            "material weakness",
            "internal controls",
            "financial statement",
        ],
        "patterns": [
            r"\b(revenue|profit|earnings)\s+(increased|decreased)\s+by\s+\d{3,}%",
            r"\bno\s+material\s+weaknesses?\b",
        ],
        "examples": ["Revenue increased by 500% this quarter"],
    },
    {
        "id": "gdpr-privacy-001",
        "rule_text": "Personal data processing requires explicit consent and a lawful basis",
        "regulation": "GDPR",
        "jurisdiction": "EU",
        "domain": "legal",
        "severity": "high",
        "keywords": [
            "personal data",
            "consent",
            "data subject",
            "processing",
            "third party",
            "data sharing",
        ],
        "patterns": [
            r"\b(collect|process|share)\s+.*\s+(without|no)\s+consent\b",
            r"\bpersonal\s+data\s+.*\s+automatically\s+(shared|processed)\b",
        ],
        "examples": ["We share customer data without consent"],
    },
    {
        "id": "insurance-claim-001",
        "rule_text": "Claim handling must not involve unfair or discriminatory practices",
        "regulation": "State Insurance Code",
        "jurisdiction": "US",
        "domain": "insurance",
        "severity": "high",
        "keywords": [
            "claim denial",
            "discrimination",
            "unfair practice",
            "automatic rejection",
            "bias",
        ],
        "patterns": [
            r"\b(automatically|always)\s+(deny|reject)\s+claims?\b",
            r"\b(age|race|gender|zip\s+code)\s+based\s+(denial|rejection)\b",
        ],
        "examples": ["We automatically deny claims from this region"],
    },
]
