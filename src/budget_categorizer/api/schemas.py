from pydantic import BaseModel, Field

from budget_categorizer.analysis.rule_health import RuleScore
from budget_categorizer.models import (
    CategorizationResult,
    CategorizationRule,
    MatchMode,
    RawTransaction,
    SimilarityMatch,
    SimilarityReference,
)


class ClassifyRequest(BaseModel):
    transaction: RawTransaction
    rules: list[CategorizationRule] = []
    noise_filters: list[str] | None = None


class BulkClassifyRequest(BaseModel):
    transactions: list[RawTransaction]
    rules: list[CategorizationRule] = []
    noise_filters: list[str] | None = None


class BulkClassifyResponse(BaseModel):
    results: list[CategorizationResult]
    matched: int


class ScanRequest(BaseModel):
    transactions: list[RawTransaction]
    noise_filters: list[str] | None = None
    limit: int | None = Field(default=None, ge=1)


class SimilarRequest(BaseModel):
    reference: SimilarityReference
    pool: list[RawTransaction]
    target_name: str | None = None
    mode: MatchMode = MatchMode.FUZZY
    profile: str | None = None
    noise_filters: list[str] | None = None


class SimilarResponse(BaseModel):
    matches: list[SimilarityMatch]


class RuleMatchesRequest(BaseModel):
    rule: CategorizationRule
    transactions: list[RawTransaction]
    noise_filters: list[str] | None = None


class RuleHealthRequest(BaseModel):
    rules: list[CategorizationRule]
    transactions: list[RawTransaction] = []
    noise_filters: list[str] | None = None


class RuleHealthResponse(BaseModel):
    scores: dict[str, RuleScore]


class TriageRequest(BaseModel):
    transactions: list[RawTransaction]


class ProjectionScanRequest(BaseModel):
    transactions: list[RawTransaction]
