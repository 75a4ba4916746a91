"""Logical fallacy pattern set.

Each entry is one fallacy family. A sentence is flagged when any of its
``patterns`` matches (case-insensitive), or when at least two of its
``keywords`` occur in the sentence. ``name`` becomes the issue category.
"""

from typing import Any, Dict, List

FALLACY_PATTERNS: List[Dict[str, Any]] = [
    {
        "name": "ad_hominem",
        "label": "Ad hominem",
        "description": "Attacks the person making the argument rather than the argument",
        "severity": "medium",
        "patterns": [
            r"\b(?:you are|you're|he is|he's|she is|she's|they are|they're)\s+(?:just\s+|clearly\s+)?"
            r"(?:an?\s+)?(?:stupid|idiots?|incompetent|biased|unqualified|liars?|ignorant)\b",
            r"\b(?:coming from someone who|what do you expect from|typical of (?:a|an|someone))\b",
        ],
        "keywords": ["stupid", "incompetent", "biased", "unqualified", "liar", "ignorant"],
        "suggestion": "Address the argument itself rather than the person making it",
    },
    {
        "name": "straw_man",
        "label": "Straw man",
        "description": "Restates an opposing argument in a distorted form that is easier to attack",
        "severity": "medium",
        "patterns": [
            r"\bso (?:you're|you are|they're|they are) saying\b",
            r"\bwhat (?:you|they) really mean\b",
            r"\b(?:you|they|opponents) (?:want|think|believe)\b[^.]*\b"
            r"(?:destroy|eliminate|abolish|get rid of)\b",
        ],
        "keywords": [],
        "suggestion": "Respond to the position as it was actually stated",
    },
    {
        "name": "false_dichotomy",
        "label": "False dichotomy",
        "description": "Presents two options as the only ones when others exist",
        "severity": "medium",
        "patterns": [
            r"\b(?:you're|you are|we're|we are|it's|it is) either\b[^.]*\bor\b",
            r"\b(?:there are only two|the only (?:two )?options are|only two (?:choices|options|ways))\b",
            r"\byou must choose between\b",
        ],
        "keywords": [],
        "suggestion": "Acknowledge the alternatives beyond the two presented",
    },
    {
        "name": "appeal_to_authority",
        "label": "Appeal to authority",
        "description": "Treats a claim as true because an authority asserted it",
        "severity": "low",
        "patterns": [
            r"\b(?:must|has to) be (?:true|right|correct) because\b[^.]*\b(?:said|says)(?: so)?\b",
            r"\bbecause (?:the |an? |our )?(?:\w+ ){0,2}(?:experts?|ceo|doctors?|authority|professors?) "
            r"(?:said|says) so\b",
            r"\b(?:experts|authorities|scientists) (?:say|agree)\b[^.]*\b(?:so|therefore) it (?:must|is)\b",
        ],
        "keywords": ["expert says", "experts say", "said so", "trust the experts"],
        "suggestion": "Cite the evidence behind the claim, not only who made it",
    },
    {
        "name": "slippery_slope",
        "label": "Slippery slope",
        "description": "Asserts that one step will inevitably trigger a chain of consequences",
        "severity": "medium",
        "patterns": [
            r"\b(?:next thing you know|before you know it|slippery slope|domino effect)\b",
            r"\bif we (?:allow|permit|accept)\b[^.]*\b(?:will|would) (?:inevitably |eventually )?lead to\b",
        ],
        "keywords": ["inevitably", "chain reaction", "lead to", "end up"],
        "suggestion": "Support each step of the proposed chain of events with evidence",
    },
    {
        "name": "circular_reasoning",
        "label": "Circular reasoning",
        "description": "Uses the conclusion as its own premise",
        "severity": "high",
        "patterns": [
            r"\b\w+ (?:is|are) (\w+) because (?:it|they) (?:is|are) \1\b",
            r"\b(?:true|right|correct) because (?:it|this) is (?:true|right|correct)\b",
            r"\bit(?:'s| is) the best because it(?:'s| is) better\b",
        ],
        "keywords": [],
        "suggestion": "Give evidence that does not restate the conclusion",
    },
    {
        "name": "hasty_generalization",
        "label": "Hasty generalization",
        "description": "Draws a broad conclusion from too few examples",
        "severity": "medium",
        "patterns": [
            r"\b(?:this|that|it) proves (?:that )?(?:all|every|everyone|no one)\b",
            r"\b(?:all|every)\s+\w+(?:\s+\w+)?\s+(?:are|is)\s+\w+\s+because\s+(?:i|we)\s+"
            r"(?:met|saw|knew|know|heard of)\s+(?:one|a|an|someone)\b",
            r"\b(?:one|a single)\s+(?:case|example|customer|patient|person|study)\b[^.]*\b"
            r"(?:proves|shows)\b[^.]*\b(?:all|every|always|never)\b",
        ],
        "keywords": [],
        "suggestion": "Base the generalization on a representative sample",
    },
    {
        "name": "appeal_to_emotion",
        "label": "Appeal to emotion",
        "description": "Relies on an emotional reaction in place of reasoning",
        "severity": "medium",
        "patterns": [
            r"\b(?:think of the children|how would you feel|imagine how)\b",
            r"\b(?:heartbreaking|devastating|tragic|terrifying)\b[^.]*\b(?:therefore|proves|so we must|thus)\b",
        ],
        "keywords": ["heartbreaking", "devastating", "tragic", "terrifying", "outrageous"],
        "suggestion": "Replace the emotional appeal with the supporting facts",
    },
    {
        "name": "bandwagon",
        "label": "Bandwagon",
        "description": "Argues a claim is correct because many people believe it",
        "severity": "low",
        "patterns": [
            r"\b(?:everyone|everybody) knows\b",
            r"\bmost people (?:believe|agree|think)\b",
            r"\beveryone is doing it\b",
        ],
        "keywords": [],
        "suggestion": "Show why the claim holds rather than how many people accept it",
    },
]
