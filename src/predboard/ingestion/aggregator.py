"""Offset pagination over an upstream listing with id/title deduplication."""

from __future__ import annotations

from typing import Any, Callable, Iterable

import structlog

log = structlog.get_logger(__name__)

PageFetcher = Callable[[int, int], Any]  # (offset, limit) -> decoded JSON page


class Deduplicator:
    """Rejects records whose id, or non-empty title, was already accepted in this session."""

    def __init__(self, *, dedupe_titles: bool = True) -> None:
        self.dedupe_titles = dedupe_titles
        self.seen_ids: set[str] = set()
        self.seen_titles: set[str] = set()
        self.skipped = 0
        self.missing_id = 0
        self.accepted: list[Any] = []

    def add(self, record: Any, record_id: str | None, title: str = "") -> bool:
        """Accept record unless it collides; returns whether it was kept."""
        if not record_id:
            self.missing_id += 1
            return False
        if record_id in self.seen_ids or (self.dedupe_titles and title and title in self.seen_titles):
            self.skipped += 1
            if self.skipped % 10 == 0:
                log.debug("duplicates_skipped", count=self.skipped)
            return False
        self.seen_ids.add(record_id)
        if self.dedupe_titles and title:
            self.seen_titles.add(title)
        self.accepted.append(record)
        return True

    def extend(self, records: Iterable[Any], key: Callable[[dict[str, Any]], tuple[str | None, str]]) -> None:
        for record in records:
            if not isinstance(record, dict):
                continue
            record_id, title = key(record)
            self.add(record, record_id, title)


def page_records(page: Any) -> list[Any] | None:
    """Records in a decoded page, or None if the page is malformed."""
    if isinstance(page, list):
        return page
    if isinstance(page, dict) and isinstance(page.get("data"), list):
        return page["data"]
    return None


def collect_pages(
    fetch_page: PageFetcher,
    dedup: Deduplicator,
    key: Callable[[dict[str, Any]], tuple[str | None, str]],
    *,
    page_size: int = 100,
    max_pages: int = 5,
) -> int:
    """Fetch pages until an empty, malformed or short page, or max_pages. Returns pages fetched.

    Errors raised by fetch_page propagate and abort the whole collection.
    """
    pages = 0
    for batch in range(max_pages):
        offset = batch * page_size
        page = fetch_page(offset, page_size)
        pages += 1
        records = page_records(page)
        if not records:
            log.info("pagination_end", offset=offset, reason="empty_or_malformed")
            break
        log.info("page_received", offset=offset, count=len(records))
        dedup.extend(records, key)
        if len(records) < page_size:
            log.info("pagination_end", offset=offset, reason="short_page")
            break
    log.info(
        "pagination_done",
        pages=pages,
        unique=len(dedup.accepted),
        duplicates_skipped=dedup.skipped,
    )
    return pages
