from collections import defaultdict

from pydantic import BaseModel

from budget_categorizer.logger import get_logger
from budget_categorizer.models import RawTransaction, TransactionStatus

logger = get_logger(__name__)

_SETTLED_STATUSES = {TransactionStatus.COMPLETE.value, TransactionStatus.EXCLUDED.value}


class TriageReport(BaseModel):
    duplicates: list[list[RawTransaction]] = []
    pending_mapping: list[RawTransaction] = []
    pending_category: list[RawTransaction] = []
    pending_validation: list[RawTransaction] = []

    @property
    def pending_total(self) -> int:
        return len(self.pending_mapping) + len(self.pending_category) + len(self.pending_validation)


def _duplicate_key(tx: RawTransaction) -> tuple:
    return (tx.date, tx.amount, tx.source_text.lower())


def build_triage_report(transactions: list[RawTransaction]) -> TriageReport:
    """
    Sort unsettled transactions into the review queues.

    Transactions sharing date, amount and source are reported together as
    duplicates and kept out of the other queues. Complete and Excluded
    transactions appear in no queue.
    """
    by_key: dict[tuple, list[RawTransaction]] = defaultdict(list)
    for tx in transactions:
        by_key[_duplicate_key(tx)].append(tx)

    duplicates = [group for group in by_key.values() if len(group) > 1]
    duplicate_ids = {id(tx) for group in duplicates for tx in group}

    report = TriageReport(duplicates=duplicates)
    for tx in transactions:
        if id(tx) in duplicate_ids or tx.status in _SETTLED_STATUSES:
            continue
        if tx.confidence <= 0:
            report.pending_mapping.append(tx)
        elif tx.category and tx.sub_category:
            report.pending_validation.append(tx)
        else:
            report.pending_category.append(tx)

    logger.info(
        "[TRIAGE] %d duplicate groups, %d to map, %d to categorize, %d to validate.",
        len(report.duplicates),
        len(report.pending_mapping),
        len(report.pending_category),
        len(report.pending_validation),
    )
    return report
