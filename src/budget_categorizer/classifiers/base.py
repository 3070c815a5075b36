from abc import ABC, abstractmethod
from dataclasses import dataclass

from budget_categorizer.models import CategorizationRule


@dataclass(frozen=True)
class NameCandidate:
    """The two spellings of a transaction name that rules are compared against."""
    raw: str
    clean: str

    @property
    def raw_key(self) -> str:
        return self.raw.strip().lower()

    @property
    def clean_key(self) -> str:
        return self.clean.strip().lower()


@dataclass(frozen=True)
class RuleMatch:
    rule: CategorizationRule
    confidence: float
    source: str


class RuleClassifier(ABC):
    @abstractmethod
    def classify(
        self, candidate: NameCandidate, rules: list[CategorizationRule]
    ) -> RuleMatch | None:
        """Return the first rule (in caller order) this tier accepts."""
        pass
