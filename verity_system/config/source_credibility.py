"""Source credibility configuration for fact checking.

Hybrid approach:
- Type-based baselines for every source category
- Domain-suffix adjustments for sources that carry a URL
- Per-business-domain reliability for encyclopedia content

Source hierarchy (from most to least credible):
1. Government agencies: 95
2. Academic / peer-reviewed: 90
3. Encyclopedias: 80
4. Industry bodies: 75
5. Internal knowledge base: 70
6. News outlets: 60
7. Other / unknown: 50
"""

from typing import Dict

# Baseline credibility (0-100) by source type
SOURCE_TYPE_BASELINES: Dict[str, float] = {
    "government": 95.0,
    "academic": 90.0,
    "encyclopedia": 80.0,
    "industry": 75.0,
    "internal": 70.0,
    "news": 60.0,
    "other": 50.0,
}

# Known hosts with a fixed credibility
SOURCE_BASELINES: Dict[str, float] = {
    "fda.gov": 98.0,
    "sec.gov": 98.0,
    "cdc.gov": 97.0,
    "nih.gov": 97.0,
    "fdic.gov": 97.0,
    "hhs.gov": 96.0,
    "europa.eu": 95.0,
    "who.int": 95.0,
    "en.wikipedia.org": 75.0,
    "wikipedia.org": 75.0,
    "reuters.com": 85.0,
    "apnews.com": 85.0,
}

# Adjustments (points) applied when the URL host ends with the suffix
DOMAIN_PATTERN_ADJUSTMENTS: Dict[str, float] = {
    ".gov": 10.0,
    ".mil": 10.0,
    ".edu": 8.0,
    ".int": 5.0,
    ".org": 2.0,
}

# Encyclopedia coverage quality varies by business domain
ENCYCLOPEDIA_DOMAIN_RELIABILITY: Dict[str, float] = {
    "healthcare": 70.0,
    "financial": 75.0,
    "legal": 65.0,
    "insurance": 70.0,
}

# Provider reliabilities
WIKIPEDIA_RELIABILITY: float = 75.0
GOVERNMENT_RELIABILITY: float = 95.0
INTERNAL_KB_RELIABILITY: float = 70.0
