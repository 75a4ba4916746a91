"""Word lists for contradiction and coherence analysis.

Kept as data so each list can be reviewed and tested on its own. All
entries are lowercase.
"""

from typing import Dict, List, Set, Tuple

NEGATION_WORDS: Set[str] = {
    "not", "no", "never", "none", "nobody", "nothing", "neither", "nowhere",
    "nor", "without", "cannot", "isn't", "aren't", "wasn't", "weren't",
    "don't", "doesn't", "didn't", "won't", "wouldn't", "can't", "couldn't",
    "shouldn't", "hasn't", "haven't", "hadn't",
}

# Contraction -> positive form, used when stripping negation
NEGATED_CONTRACTIONS: Dict[str, str] = {
    "isn't": "is",
    "aren't": "are",
    "wasn't": "was",
    "weren't": "were",
    "don't": "do",
    "doesn't": "does",
    "didn't": "did",
    "won't": "will",
    "wouldn't": "would",
    "can't": "can",
    "cannot": "can",
    "couldn't": "could",
    "shouldn't": "should",
    "hasn't": "has",
    "haven't": "have",
    "hadn't": "had",
}

STOP_WORDS: Set[str] = {
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "in", "on", "at", "to", "for", "of", "and", "or", "but", "as",
    "has", "have", "had", "that", "this", "these", "those", "with", "by",
    "from", "it", "its", "will", "would", "can", "could", "should", "do",
    "does", "did", "very", "so", "than", "there", "their", "our", "we",
}

# Words that end the subject of a simple declarative sentence
SUBJECT_BOUNDARY_WORDS: Set[str] = {
    "is", "are", "was", "were", "will", "has", "have", "had", "does", "do",
    "did", "can", "could", "should", "must", "may", "might", "shall",
    "would", "be", "been", "remains", "remain", "became", "become",
}

# Mutually exclusive qualifiers: (a, b)
QUALIFIER_PAIRS: List[Tuple[str, str]] = [
    ("always", "never"),
    ("all", "none"),
    ("everyone", "no one"),
    ("everything", "nothing"),
    ("required", "optional"),
    ("mandatory", "optional"),
]

# Antonymous predicates, inflected forms listed explicitly
ANTONYM_PAIRS: List[Tuple[str, str]] = [
    ("increase", "decrease"),
    ("increases", "decreases"),
    ("increased", "decreased"),
    ("increasing", "decreasing"),
    ("rise", "fall"),
    ("rises", "falls"),
    ("rose", "fell"),
    ("rising", "falling"),
    ("gain", "loss"),
    ("gained", "lost"),
    ("profit", "loss"),
    ("profitable", "unprofitable"),
    ("growth", "decline"),
    ("growing", "declining"),
    ("expand", "contract"),
    ("expanding", "contracting"),
    ("approve", "reject"),
    ("approved", "rejected"),
    ("accept", "deny"),
    ("accepted", "denied"),
    ("allow", "prohibit"),
    ("allowed", "prohibited"),
    ("allows", "prohibits"),
    ("permitted", "forbidden"),
    ("legal", "illegal"),
    ("compliant", "noncompliant"),
    ("safe", "unsafe"),
    ("secure", "insecure"),
    ("effective", "ineffective"),
    ("true", "false"),
    ("correct", "incorrect"),
    ("valid", "invalid"),
    ("success", "failure"),
    ("successful", "unsuccessful"),
    ("high", "low"),
    ("higher", "lower"),
    ("more", "less"),
    ("above", "below"),
    ("fast", "slow"),
    ("faster", "slower"),
    ("open", "closed"),
    ("active", "inactive"),
    ("present", "absent"),
    ("positive", "negative"),
    ("benefit", "harm"),
]

# Predicate synonyms folded to one form before negation matching:
# "is secure" vs "is not protected" negates the same predicate
PREDICATE_SYNONYMS: Dict[str, str] = {
    "protected": "secure",
    "quick": "fast",
    "rapid": "fast",
    "sluggish": "slow",
    "finished": "complete",
    "completed": "complete",
    "delayed": "late",
    "overdue": "late",
    "accurate": "correct",
    "right": "correct",
    "lawful": "legal",
    "permitted": "allowed",
    "authorized": "allowed",
    "big": "large",
    "little": "small",
    "ready": "prepared",
}

# Temporal relation pairs that reverse event order
TEMPORAL_PAIRS: List[Tuple[str, str]] = [
    ("before", "after"),
    ("earlier", "later"),
    ("prior to", "following"),
    ("preceded", "followed"),
]

POSITIVE_WORDS: Set[str] = {
    "good", "excellent", "great", "positive", "successful", "success",
    "effective", "beneficial", "improved", "improvement", "strong",
    "outstanding", "profitable", "efficient", "reliable", "superior",
    "robust", "thriving", "favorable", "impressive",
}

NEGATIVE_WORDS: Set[str] = {
    "bad", "terrible", "poor", "negative", "failed", "failure",
    "ineffective", "harmful", "worse", "worsened", "weak", "disappointing",
    "unprofitable", "inefficient", "unreliable", "inferior", "fragile",
    "collapsing", "unfavorable", "disastrous",
}

# Discourse connectives that legitimately bridge a topic change
DISCOURSE_CONNECTIVES: List[str] = [
    "however", "meanwhile", "furthermore", "moreover", "additionally",
    "on the other hand", "in contrast", "similarly", "likewise",
    "nevertheless", "in addition", "also", "finally", "first", "second",
    "next", "then", "consequently", "therefore", "for example",
]

# Sentence-initial sequence markers and their rank in an enumeration
SEQUENCE_MARKERS: Dict[str, int] = {
    "first": 1,
    "firstly": 1,
    "initially": 1,
    "second": 2,
    "secondly": 2,
    "then": 3,
    "next": 3,
    "subsequently": 3,
    "afterwards": 3,
    "third": 3,
    "finally": 5,
    "lastly": 5,
    "ultimately": 5,
}
TERMINAL_SEQUENCE_RANK: int = 5

# Event-ordering markers: "A before B" means A precedes B
EVENT_ORDER_MARKERS: Dict[str, str] = {
    "before": "precedes",
    "prior to": "precedes",
    "preceded": "precedes",
    "after": "follows",
    "following": "follows",
    "followed": "follows",
}

# "A <indicator> B" where A is the cause
FORWARD_CAUSAL_INDICATORS: List[str] = [
    "leads to", "led to", "causes", "caused", "results in", "resulted in",
    "brings about", "triggers", "triggered", "drives", "therefore",
]

# "A <indicator> B" where B is the cause
BACKWARD_CAUSAL_INDICATORS: List[str] = [
    "because of", "because", "due to", "caused by", "resulting from",
    "owing to", "as a result of", "driven by", "triggered by",
]

REFERENCE_PRONOUNS: Set[str] = {
    "he", "she", "it", "they", "him", "her", "them", "his", "hers", "its", "their",
}

# "it" used as a dummy subject ("it is important that ...") needs no antecedent
EXPLETIVE_IT_PATTERN: str = (
    r"\bit\s+(?:is|was|seems|appears|has\s+been|will\s+be)\s+"
    r"(?:\w+\s+){0,2}(?:that|to|whether|if)\b"
)

# Determiners that introduce a noun phrase able to serve as an antecedent
DETERMINERS: Set[str] = {
    "the", "a", "an", "this", "that", "these", "those", "each", "every", "our", "your",
}

# Words that carry no event identity ("the audit happened" == "the audit")
EVENT_FILLER_WORDS: Set[str] = {
    "happened", "occurred", "took", "place", "completed", "started", "began",
    "finished", "was", "were", "been", "then", "event",
}

# Subject words that disqualify a sentence from pairwise comparison
PRONOUN_SUBJECTS: Set[str] = {"it", "they", "he", "she", "this", "that", "we", "i", "you"}

# Words announcing that the percentages in a sentence partition a whole
BREAKDOWN_CUES: Set[str] = {
    "breakdown", "distribution", "distributed", "split", "allocated",
    "allocation", "composed", "consists", "comprises", "divided", "share",
}

# Measurement units by quantity; only same-family quantities add up
UNIT_FAMILIES: Dict[str, str] = {
    "mg": "mass", "g": "mass", "kg": "mass", "lb": "mass", "lbs": "mass",
    "tons": "mass", "grams": "mass", "kilograms": "mass", "pounds": "mass",
    "mm": "length", "cm": "length", "km": "length", "ft": "length",
    "mi": "length", "miles": "length", "meters": "length", "feet": "length",
    "ml": "volume", "gal": "volume", "liters": "volume", "gallons": "volume",
    "sec": "time", "seconds": "time", "minutes": "time", "hours": "time",
    "hrs": "time", "days": "time", "weeks": "time", "months": "time", "years": "time",
}

# Nouns that only take non-negative counts
COUNT_NOUNS: Set[str] = {
    "patients", "employees", "customers", "people", "users", "members",
    "claims", "cases", "units", "items", "staff", "visits", "accounts",
    "policies", "policyholders", "transactions", "incidents", "beds",
}

# A share above 100% is legitimate when measured against one of these
RELATIVE_PERCENT_CUES: Set[str] = {
    "target", "goal", "budget", "forecast", "baseline", "plan", "quota",
    "capacity", "increase", "increased", "growth", "grew", "rose", "above",
    "over", "higher", "exceeded", "exceeds", "more", "last", "previous", "prior",
}
