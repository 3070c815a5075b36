from typing import Any


def parse_filter_list(raw_filters: str | None) -> list[str]:
    if not raw_filters:
        return []
    parts = [part.strip() for part in raw_filters.split(",")]
    filters: list[str] = []
    seen = set()
    for part in parts:
        if part and part not in seen:
            filters.append(part)
            seen.add(part)
    return filters


def normalize_filters(value: Any) -> list[Any]:
    """
    Accept a list or a comma-separated string of noise filters.

    List entries are passed through untouched (leading spaces can be
    significant) apart from de-duplication; the cleaner decides what is usable.
    """
    if not value:
        return []
    if isinstance(value, str):
        return parse_filter_list(value)
    if isinstance(value, (list, tuple)):
        filters: list[Any] = []
        seen = set()
        for item in value:
            key = item if isinstance(item, str) else repr(item)
            if key not in seen:
                filters.append(item)
                seen.add(key)
        return filters
    return []

