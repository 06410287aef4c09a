"""Configuration schema models using Pydantic."""

import math
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ScheduleFrequency(str, Enum):
    """Cadence of the alert dispatch run."""

    DAILY = "daily"
    WEEKLY = "weekly"


class ScoringWeights(BaseModel):
    """Relative weight of each component in the aggregate match score."""

    keyword: float = Field(0.30, ge=0.0, le=1.0, description="Keyword component weight")
    skill: float = Field(0.35, ge=0.0, le=1.0, description="Skill component weight")
    location: float = Field(0.15, ge=0.0, le=1.0, description="Location component weight")
    job_type: float = Field(0.10, ge=0.0, le=1.0, description="Job type component weight")
    recency: float = Field(0.10, ge=0.0, le=1.0, description="Recency component weight")

    @model_validator(mode="after")
    def validate_sum(self):
        """Weights must sum to 1.0 so the score stays a percentage."""
        total = self.keyword + self.skill + self.location + self.job_type + self.recency
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.4f}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {
            "keyword": self.keyword,
            "skill": self.skill,
            "location": self.location,
            "job_type": self.job_type,
            "recency": self.recency,
        }


class MatchingConfig(BaseModel):
    """Tuning knobs for the matching engine."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights, description="Score weights")
    min_score: int = Field(
        10, ge=0, le=100, description="Matches scoring below this percentage are dropped"
    )
    max_results: int = Field(10, ge=1, le=100, description="Maximum matches per alert")
    search_history_window: int = Field(
        20, ge=0, le=200, description="Number of most recent searches mined for keywords"
    )


class ScheduleConfig(BaseModel):
    """When the dispatch pipeline runs."""

    frequency: ScheduleFrequency = Field(
        ScheduleFrequency.WEEKLY,
        description="weekly (Monday 09:00) or daily (08:00)",
    )
    timezone: str = Field("UTC", min_length=1, description="Timezone for the cron schedule")
    test_interval_minutes: Optional[int] = Field(
        None,
        ge=1,
        le=1440,
        description="If set, also run every N minutes (testing only)",
    )
    run_on_startup: bool = Field(False, description="Run once immediately when the daemon starts")

    @field_validator("timezone")
    @classmethod
    def strip_timezone(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("timezone cannot be empty")
        return stripped

    model_config = {"use_enum_values": True, "validate_default": True}


class EmailConfig(BaseModel):
    """Email notification settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    max_retries: int = Field(
        3, ge=0, le=10, description="Number of retry attempts for failed email sends"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: int = Field(
        5, ge=1, le=60, description="Initial retry delay in seconds"
    )
    max_matches_per_email: int = Field(
        10, ge=1, le=50, description="Number of top matches included in one digest"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the smart job alert service."""

    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig, description="Run schedule")
    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Matching engine settings"
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @model_validator(mode="after")
    def validate_digest_size(self):
        """A digest never carries more matches than the engine returns."""
        if self.email.max_matches_per_email > self.matching.max_results:
            raise ValueError(
                f"email.max_matches_per_email ({self.email.max_matches_per_email}) cannot exceed "
                f"matching.max_results ({self.matching.max_results})"
            )
        return self
