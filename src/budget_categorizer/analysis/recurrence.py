from collections.abc import Iterable
from typing import Any

from budget_categorizer.core.profiles import INTERVAL_CONFIDENCE, STRICT, EngineProfile
from budget_categorizer.domain.dates import day_gaps, parse_date
from budget_categorizer.logger import get_logger
from budget_categorizer.models import RecurrenceEstimate, RecurrenceInterval

logger = get_logger(__name__)


class RecurrenceDetector:
    """
    Infers a charge cadence from the average gap between occurrences.

    A single average with no outlier rejection: irregular gaps
    that happen to average into a band are reported as that band.
    """

    def __init__(self, profile: EngineProfile = STRICT):
        self.profile = profile

    def classify_gap(self, average_gap: float) -> RecurrenceInterval:
        for band in self.profile.recurrence_bands:
            if band.contains(average_gap):
                return band.interval
        return RecurrenceInterval.NOT_APPLICABLE

    def detect(self, dates: Iterable[Any] | None) -> RecurrenceEstimate:
        raw_dates = list(dates or [])
        parsed = [d for d in (parse_date(value) for value in raw_dates) if d is not None]
        if len(parsed) != len(raw_dates):
            logger.debug(
                "[RECUR] Ignored %d unreadable dates out of %d.",
                len(raw_dates) - len(parsed),
                len(raw_dates),
            )
        if len(parsed) < 2:
            return RecurrenceEstimate()

        gaps = day_gaps(parsed)
        average_gap = sum(gaps) / len(gaps)
        interval = self.classify_gap(average_gap)
        return RecurrenceEstimate(
            interval=interval,
            confidence=INTERVAL_CONFIDENCE.get(interval, 0.0),
            average_gap=average_gap,
        )


def detect_recurrence(dates: Iterable[Any] | None, profile: EngineProfile = STRICT) -> RecurrenceEstimate:
    return RecurrenceDetector(profile).detect(dates)
