"""Verity settings, read from VERITY_* environment variables or a .env file."""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Runtime configuration for the verification pipeline.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        fact_check_threshold: Claim confidence (0-100) below which a contradicted
            claim becomes a factual_error issue
        strict_fact_check_threshold: Threshold used when strict mode is on
        max_concurrent_claims: Fan-out cap for claim verification per request
        max_claims_per_document: Upper bound on claims extracted per document
        source_timeout_seconds: Per-provider timeout for external queries
        enable_external_sources: Register HTTP-backed providers by default
        wikipedia_api_url: Search endpoint for the encyclopedia provider
        government_api_url: Search endpoint for the government data provider
        http_max_retries: Retry attempts for transient HTTP failures
        default_jurisdiction: Jurisdiction used when a request names none
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    fact_check_threshold: float = Field(
        default=70.0,
        ge=0.0,
        le=100.0,
        description="Confidence below which a contradicted claim is reported"
    )
    strict_fact_check_threshold: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Reporting threshold when strict mode is enabled"
    )
    fact_check_domain_thresholds: Dict[str, float] = Field(
        default_factory=dict,
        description="Per-domain reporting threshold, e.g. {\"healthcare\": 80}; "
        "domains not listed use fact_check_threshold"
    )
    max_concurrent_claims: int = Field(
        default=5,
        ge=1,
        description="Maximum claims verified concurrently per request"
    )
    max_claims_per_document: int = Field(
        default=50,
        ge=1,
        description="Maximum claims extracted from one document"
    )
    source_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Timeout applied to each external source query"
    )
    enable_external_sources: bool = Field(
        default=False,
        description="Register HTTP-backed knowledge sources by default"
    )
    wikipedia_api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        description="MediaWiki search endpoint"
    )
    government_api_url: Optional[str] = Field(
        default=None,
        description="Government open-data search endpoint (optional)"
    )
    http_max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts for transient HTTP failures"
    )
    default_jurisdiction: str = Field(
        default="US",
        description="Jurisdiction used when a request does not name one"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "VERITY_",
        "case_sensitive": False,
    }


# Shared instance; components read defaults from it at construction
settings = Settings()
