import datetime as dt
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from budget_categorizer.domain.dates import parse_date


class RecurrenceInterval(str, Enum):
    NOT_APPLICABLE = "N/A"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    BI_ANNUALLY = "Bi-annually"
    ANNUALLY = "Annually"
    ONE_OFF = "One-off"


class MatchMode(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"


class TransactionStatus(str, Enum):
    PENDING_TRIAGE = "Pending Triage"
    COMPLETE = "Complete"
    EXCLUDED = "Excluded"


class MatchKind(str, Enum):
    EXACT_NAME = "exact_name"
    CONTAINS_NAME = "contains_name"
    AMOUNT_SIMILARITY = "amount_similarity"
    NONE = "none"


class ConfidenceTier(str, Enum):
    PERFECT = "perfect"
    POSSIBLE = "possible"
    NONE = "none"


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def with_changes(self, **changes: Any):
        """Return a re-validated copy with ``changes`` applied; ``self`` is left untouched."""
        return type(self).model_validate({**self.model_dump(), **changes})


class RawTransaction(FrozenModel):
    source_text: str = Field(
        default="",
        validation_alias=AliasChoices("source_text", "merchant", "source"),
    )
    date: dt.date | None = None
    amount: float = 0.0
    id: str | None = None
    category: str | None = None
    sub_category: str | None = None
    clean_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("clean_name", "clean_merchant", "clean_source"),
    )
    status: str | None = None
    confidence: float = 0.0
    planned: bool = False
    excluded: bool = False

    @field_validator("source_text", mode="before")
    @classmethod
    def _coerce_source(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("date", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> dt.date | None:
        return parse_date(value)

    @field_validator("amount", "confidence", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


class CategorizationRule(FrozenModel):
    id: str | None = None
    raw_pattern: str = ""
    clean_display_name: str = ""
    target_category: str = ""
    target_sub_category: str | None = None
    recurrence_interval: RecurrenceInterval | None = None
    default_planned_flag: bool | None = None
    exclude_from_budget: bool = False
    auto_complete: bool = False
    match_mode: MatchMode = MatchMode.FUZZY

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("raw_pattern", "clean_display_name", "target_category", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else value

    @property
    def identifying_name(self) -> str:
        return (self.raw_pattern or self.clean_display_name).strip()

    @property
    def is_matchable(self) -> bool:
        return bool(self.raw_pattern.strip() or self.clean_display_name.strip())


class CategorizationResult(FrozenModel):
    clean_name: str
    category: str = ""
    sub_category: str | None = None
    status: TransactionStatus = TransactionStatus.PENDING_TRIAGE
    confidence: float = 0.0
    confidence_tier: ConfidenceTier = ConfidenceTier.NONE
    planned: bool = True
    recurrence_interval: RecurrenceInterval = RecurrenceInterval.NOT_APPLICABLE
    excluded: bool = False
    budget_period: dt.date | None = None
    matched_rule_id: str | None = None
    source: str = "none"  # "rule_exact", "rule_fuzzy", "none"


class RecurrenceEstimate(FrozenModel):
    interval: RecurrenceInterval = RecurrenceInterval.NOT_APPLICABLE
    confidence: float = 0.0
    average_gap: float | None = None


class MerchantSuggestion(FrozenModel):
    candidate_name: str
    occurrence_count: int
    dominant_category: str
    dominant_sub_category: str
    inferred_recurrence: RecurrenceInterval
    average_amount: float
    confidence_rank: float
    planned: bool = False
    excluded: bool = False

    def to_rule(self, **overrides: Any) -> CategorizationRule:
        values: dict[str, Any] = {
            "raw_pattern": self.candidate_name,
            "clean_display_name": self.candidate_name,
            "target_category": self.dominant_category,
            "target_sub_category": self.dominant_sub_category or None,
            "recurrence_interval": self.inferred_recurrence,
            "default_planned_flag": self.planned,
            "exclude_from_budget": self.excluded,
        }
        values.update(overrides)
        return CategorizationRule.model_validate(values)


class SimilarityReference(FrozenModel):
    id: str | None = None
    name: str = ""
    source_text: str = ""
    amount: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


class SimilarityMatch(FrozenModel):
    transaction: RawTransaction
    score: float
    match_kind: MatchKind
    same_source: bool = False

    @property
    def transaction_id(self) -> str | None:
        return self.transaction.id


class ProjectionSuggestion(FrozenModel):
    name: str
    raw_name: str
    amount: float
    interval: RecurrenceInterval
    occurrence_count: int
    category: str = ""
    sub_category: str = ""
    confidence: float
    dates: tuple[dt.date, ...] = ()
