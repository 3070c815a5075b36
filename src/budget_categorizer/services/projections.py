import asyncio
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from budget_categorizer.analysis.recurrence import RecurrenceDetector
from budget_categorizer.core.profiles import STRICT, EngineProfile
from budget_categorizer.domain.dates import parse_date
from budget_categorizer.logger import get_logger
from budget_categorizer.models import ProjectionSuggestion, RawTransaction, RecurrenceInterval

logger = get_logger(__name__)

ProgressCallback = Callable[[dict[str, Any]], None]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class ProjectionGroup:
    name: str
    raw_name: str
    amount: float
    category: str
    sub_category: str
    dates: list = field(default_factory=list)


def group_transactions(transactions: list[RawTransaction]) -> list[ProjectionGroup]:
    """Group by display name and whole-unit amount, keeping first-seen order."""
    groups: dict[tuple[str, int], ProjectionGroup] = {}
    for tx in transactions:
        name = tx.clean_name or tx.source_text
        key = (name, round_half_up(tx.amount))
        group = groups.get(key)
        if group is None:
            group = ProjectionGroup(
                name=name,
                raw_name=tx.source_text,
                amount=tx.amount,
                category=tx.category or "",
                sub_category=tx.sub_category or "",
            )
            groups[key] = group
        group.dates.append(tx.date)
    return list(groups.values())


class ProjectionScanner:
    """
    Finds recurring charges worth turning into budget projections.

    Groups are evaluated in chunks on worker threads; progress is published
    after every chunk and a cancel request stops the scan before the next
    chunk starts.
    """

    def __init__(
        self,
        chunk_size: int = 10,
        workers: int = 1,
        profile: EngineProfile = STRICT,
    ) -> None:
        self.chunk_size = max(1, chunk_size)
        self.workers = max(1, workers)
        self.detector = RecurrenceDetector(profile)
        self.cancel_event = asyncio.Event()
        self.active = False
        self.status: dict[str, Any] = {"stage": "idle", "active": False}

    def request_cancel(self) -> bool:
        if self.active:
            self.cancel_event.set()
            return True
        return False

    def get_status(self) -> dict[str, Any]:
        status = dict(self.status)
        status["active"] = self.active
        return status

    def evaluate(self, group: ProjectionGroup) -> ProjectionSuggestion | None:
        if len(group.dates) < 2:
            return None

        estimate = self.detector.detect(group.dates)
        if estimate.interval == RecurrenceInterval.NOT_APPLICABLE:
            return None

        dates = sorted(d for d in (parse_date(value) for value in group.dates) if d is not None)
        return ProjectionSuggestion(
            name=group.name,
            raw_name=group.raw_name,
            amount=group.amount,
            interval=estimate.interval,
            occurrence_count=len(group.dates),
            category=group.category,
            sub_category=group.sub_category,
            confidence=estimate.confidence,
            dates=tuple(dates),
        )

    def _process_chunk(self, chunk: list[ProjectionGroup]) -> list[ProjectionSuggestion]:
        return [s for s in (self.evaluate(group) for group in chunk) if s is not None]

    def _publish(self, payload: dict[str, Any], on_progress: ProgressCallback | None) -> None:
        self.status.clear()
        self.status.update({**payload, "active": self.active})
        if on_progress:
            on_progress(dict(payload))

    async def scan(
        self,
        transactions: list[RawTransaction],
        on_progress: ProgressCallback | None = None,
    ) -> list[ProjectionSuggestion]:
        groups = group_transactions(transactions)
        total = len(groups)
        chunks = [groups[i:i + self.chunk_size] for i in range(0, total, self.chunk_size)]

        self.active = True
        self.cancel_event.clear()
        suggestions: list[ProjectionSuggestion] = []
        scanned = 0
        logger.info(
            "[PROJECT] Scanning %d groups from %d transactions (chunk size %d, workers %d).",
            total,
            len(transactions),
            self.chunk_size,
            self.workers,
        )
        self._publish({"stage": "start", "scanned": 0, "total": total, "progress": 0, "found": 0}, on_progress)

        try:
            for start in range(0, len(chunks), self.workers):
                if self.cancel_event.is_set():
                    logger.info("[PROJECT] Scan cancelled after %d of %d groups.", scanned, total)
                    self._publish(
                        {
                            "stage": "cancelled",
                            "scanned": scanned,
                            "total": total,
                            "progress": round_half_up(scanned / total * 100) if total else 0,
                            "found": len(suggestions),
                        },
                        on_progress,
                    )
                    break

                batch = chunks[start:start + self.workers]
                results = await asyncio.gather(
                    *(asyncio.to_thread(self._process_chunk, chunk) for chunk in batch)
                )
                for chunk, found in zip(batch, results):
                    scanned += len(chunk)
                    suggestions.extend(found)
                    self._publish(
                        {
                            "stage": "processing",
                            "scanned": scanned,
                            "total": total,
                            "progress": round_half_up(scanned / total * 100),
                            "found": len(suggestions),
                        },
                        on_progress,
                    )
            else:
                logger.info("[PROJECT] Complete! %d suggestions from %d groups.", len(suggestions), total)
                self.active = False
                self._publish(
                    {
                        "stage": "complete",
                        "scanned": scanned,
                        "total": total,
                        "progress": 100,
                        "found": len(suggestions),
                    },
                    on_progress,
                )
        finally:
            self.active = False
            self.cancel_event.clear()
            self.status["active"] = False

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions
