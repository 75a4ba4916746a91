"""Parsed document schemas consumed by the verification pipeline.

ParsedContent is produced by an external content-processing collaborator
and is immutable input: analyzers read it, never modify it.

TextLocation offsets are half-open character offsets into extracted_text.
Line and column are 1-based when present.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class TextLocation(BaseModel):
    """Half-open character span [start, end) within the document text."""

    start: int = Field(..., ge=0, description="Start offset (inclusive)")
    end: int = Field(..., ge=0, description="End offset (exclusive)")
    line: Optional[int] = Field(None, ge=1, description="1-based line of start")
    column: Optional[int] = Field(None, ge=1, description="1-based column of start")

    @model_validator(mode="after")
    def check_order(self) -> "TextLocation":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must be >= start ({self.start})")
        return self

    model_config = {"frozen": True}

    @classmethod
    def from_span(cls, text: str, start: int, end: int) -> "TextLocation":
        """Build a location with line/column computed from ``text``."""
        line = text.count("\n", 0, start) + 1
        last_newline = text.rfind("\n", 0, start)
        column = start - last_newline
        return cls(start=start, end=end, line=line, column=column)


class EntityType(str, Enum):
    """Typed span categories recognized by the entity extractor."""

    PERSON = "person"
    ORGANIZATION = "organization"
    DATE = "date"
    AMOUNT = "amount"
    PERCENTAGE = "percentage"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    SSN = "ssn"
    CREDIT_CARD = "credit_card"
    IP_ADDRESS = "ip_address"
    REGULATION = "regulation"
    LEGAL_ENTITY = "legal_entity"
    MEDICAL_TERM = "medical_term"
    FINANCIAL_INSTRUMENT = "financial_instrument"
    INSURANCE_TERM = "insurance_term"


class ExtractedEntity(BaseModel):
    """A typed span pulled out of document text.

    Attributes:
        type: Entity category.
        value: Matched text.
        confidence: Static per-pattern weight (0.0-1.0).
        location: Span of the match.
        context: Surrounding text window.
    """

    type: EntityType
    value: str = Field(..., description="Matched text")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Static pattern weight")
    location: TextLocation
    context: str = Field(default="", description="Surrounding text window")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "type": "email",
                    "value": "compliance@example.com",
                    "confidence": 0.95,
                    "location": {"start": 12, "end": 34, "line": 1, "column": 13},
                    "context": "Contact compliance@example.com for details",
                }
            ]
        },
    }


class DocumentStructure(BaseModel):
    """Structural outline supplied by the content processor."""

    sections: list[str] = Field(default_factory=list)
    tables: list[dict[str, Any]] = Field(default_factory=list)
    figures: list[dict[str, Any]] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class ParsedContent(BaseModel):
    """Document text plus structure, as handed to the pipeline.

    ``extracted_text`` may be empty: an empty document is a valid input that
    yields no issues. ``None`` is normalized to the empty string.
    """

    id: str = Field(..., min_length=1, description="Content identifier")
    extracted_text: str = Field(default="", description="Plain text of the document")
    content_type: str = Field(default="text", description="Original format, e.g. 'pdf'")
    structure: DocumentStructure = Field(default_factory=DocumentStructure)
    entities: list[ExtractedEntity] = Field(
        default_factory=list, description="Entities supplied by the content processor"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_text(cls, data: Any) -> Any:
        """Treat a null text body as an empty document."""
        if isinstance(data, dict) and data.get("extracted_text") is None:
            data = {**data, "extracted_text": ""}
        return data

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "doc-001",
                    "extracted_text": "Revenue increased by 12% in Q3.",
                    "content_type": "pdf",
                }
            ]
        },
    }
