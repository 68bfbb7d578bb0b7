"""
Source tiers and the fallback chain that folds over them.

A tier is a named loader returning canonical records. FallbackChain.run()
tries tiers in order and returns the first non-empty result; failures are
logged and the next tier is tried.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, List, Optional, Sequence

import httpx

from .archive import ArchiveDocument
from .assets import relocate_images, resolve_image_url
from .errors import EmptyResult, SourcesExhausted, TransportFailure
from .models import CacheStatus, CanonicalRecord, RawRow
from .normalize import decode_payload, dedupe_records, log_summary, normalize_row
from .rules import (
    CHUNK_ROWS,
    MAX_ARCHIVE_RECORDS,
    MAX_REMOTE_ROWS,
    PLACEHOLDER_IMAGE_URL,
    REMOTE_LAST_COLUMN,
    REMOTE_WORKERS,
)
from .settings import Settings
from .tables import build_headers, extract_archive_table, extract_csv_table
from .tokenizer import DelimitedText

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tier:
    name: str
    status: CacheStatus
    load: Callable[[], Sequence[CanonicalRecord]]


@dataclass(frozen=True)
class TierOutcome:
    tier: str
    status: CacheStatus
    records: List[CanonicalRecord]


class FallbackChain:
    def __init__(self, tiers: Iterable[Tier]):
        self.tiers = list(tiers)

    def run(self) -> TierOutcome:
        """
        Return the outcome of the first tier that yields records.

        Raises:
            SourcesExhausted: if every tier raised or returned nothing
        """
        for tier in self.tiers:
            try:
                records = list(tier.load())
                if not records:
                    raise EmptyResult(f"{tier.name} tier produced no records")
            except Exception as e:
                logger.warning("Source tier %r failed: %s", tier.name, e)
                logger.debug("Tier %r traceback", tier.name, exc_info=True)
                continue

            logger.info("Source tier %r returned %d records", tier.name, len(records))
            return TierOutcome(tier=tier.name, status=tier.status, records=records)

        raise SourcesExhausted(f"All {len(self.tiers)} source tiers failed")


# --- archive tier ---

def load_archive_records(settings: Settings) -> List[CanonicalRecord]:
    with ArchiveDocument(settings.archive_path) as document:
        table = extract_archive_table(document.content())
        image_map = relocate_images(document, settings.asset_dir, settings.asset_url_prefix)

    records = [
        normalize_row(row, table.headers, resolve_image_url(row, image_map))
        for row in table.rows
    ]
    records = dedupe_records(records)[:MAX_ARCHIVE_RECORDS]
    log_summary(records, "archive")
    return records


# --- remote chunked tier ---

def chunk_ranges(max_rows: int = MAX_REMOTE_ROWS, chunk_rows: int = CHUNK_ROWS,
                 last_column: str = REMOTE_LAST_COLUMN) -> List[str]:
    """Cell ranges covering rows 1..max_rows in windows of chunk_rows."""
    return [
        f"A{start}:{last_column}{min(start + chunk_rows - 1, max_rows)}"
        for start in range(1, max_rows + 1, chunk_rows)
    ]


def fetch_chunk(client: httpx.Client, url: str) -> str:
    """
    Fetch one CSV window and decode it.

    Raises:
        TransportFailure: on network errors, timeouts or non-2xx responses
    """
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise TransportFailure(f"Request failed for {url}: {e}") from e

    if not response.is_success:
        raise TransportFailure(
            f"HTTP {response.status_code} for {url}", status_code=response.status_code
        )
    return decode_payload(response.content)


class RemoteSheetSource:
    """Chunked CSV export of the remote spreadsheet."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None,
                 workers: int = REMOTE_WORKERS):
        self.settings = settings
        self.client = client
        self.workers = workers

    def urls(self) -> List[str]:
        return [self.settings.sheet_csv_url(r) for r in chunk_ranges()]

    def _fetch_or_none(self, client: httpx.Client, url: str) -> Optional[str]:
        try:
            return fetch_chunk(client, url)
        except TransportFailure as e:
            logger.warning("Skipping chunk: %s", e)
            return None

    def fetch_chunks(self) -> List[Optional[str]]:
        """Chunk texts in ascending range order; None marks a failed chunk."""
        if self.client is not None:
            return self._fetch_all(self.client)
        with httpx.Client(timeout=self.settings.remote_timeout, follow_redirects=True) as client:
            return self._fetch_all(client)

    def _fetch_all(self, client: httpx.Client) -> List[Optional[str]]:
        urls = self.urls()
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(partial(self._fetch_or_none, client), urls))

    def load(self) -> List[CanonicalRecord]:
        chunks = self.fetch_chunks()
        if all(chunk is None for chunk in chunks):
            raise TransportFailure("Every remote chunk failed")

        headers: List[str] = []
        rows: List[RawRow] = []
        for index, chunk in enumerate(chunks):
            if chunk is None:
                continue
            tokenized = DelimitedText(chunk).rows()
            if index == 0 and tokenized:
                headers = build_headers(tokenized[0])
                tokenized = tokenized[1:]
            rows.extend(extract_csv_table(tokenized, header=False).rows)

        records = dedupe_records(normalize_row(row, headers, PLACEHOLDER_IMAGE_URL) for row in rows)
        log_summary(records, "remote")
        return records


def build_live_tiers(settings: Settings, client: Optional[httpx.Client] = None) -> List[Tier]:
    return [
        Tier("archive", CacheStatus.MISS, partial(load_archive_records, settings)),
        Tier("remote", CacheStatus.MISS, RemoteSheetSource(settings, client).load),
    ]
