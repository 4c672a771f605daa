"""Popularity Ranking: pure second-stage aggregation and per-year top-N selection.

Invariants:
    - Popularity of (year, item) = MAX of the per-(day, user) counts, never a SUM
    - Within a year: popularity descending, item id ascending on ties
    - Years emitted newest first; a year never yields more than top_n rows
    - Items whose name cannot be resolved get UNKNOWN_ITEM_NAME (data-quality fallback, not an error)
    - No IO: input rows come from the ledger query in services/

Design Decisions:
    - Stage 1 (count per year/item/day/user) is a SQL GROUP BY; stage 2 (max per
      year/item) is a separate pass here. Folding both into one pass would
      conflate total purchases with the best single-day burst.
    - Item id as tie-breaker: deterministic reports for tests and caching
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping

from market.core.domain_types import (
    DEFAULT_REPORT_TOP_N, UNKNOWN_ITEM_NAME, ItemId, UserId,
)


@dataclass(frozen=True)
class DailyPurchaseCount:
    """Stage 1 row: how many times one user bought one item on one day."""
    year: int
    item_id: ItemId
    day: date
    user_id: UserId
    count: int


@dataclass(frozen=True)
class ItemPopularity:
    """Stage 2 row: best single-user single-day count for an item in a year."""
    year: int
    item_id: ItemId
    popularity: int


@dataclass(frozen=True)
class PopularItemReport:
    year: int
    item_name: str
    purchase_count: int


def compute_popularity(rows: Iterable[DailyPurchaseCount]) -> list[ItemPopularity]:
    """Group stage-1 rows by (year, item) and keep the maximum count."""
    best: dict[tuple[int, ItemId], int] = {}
    for row in rows:
        key = (row.year, row.item_id)
        if row.count > best.get(key, 0):
            best[key] = row.count
    return [
        ItemPopularity(year=year, item_id=item_id, popularity=count)
        for (year, item_id), count in best.items()
    ]


def rank_top_items(
    popularity: Iterable[ItemPopularity], top_n: int = DEFAULT_REPORT_TOP_N,
) -> list[ItemPopularity]:
    """Top-N items per year by popularity, newest year first."""
    if top_n < 1:
        raise ValueError(f"top_n must be positive, got {top_n}")

    by_year: dict[int, list[ItemPopularity]] = defaultdict(list)
    for entry in popularity:
        by_year[entry.year].append(entry)

    ranked: list[ItemPopularity] = []
    for year in sorted(by_year, reverse=True):
        entries = sorted(
            by_year[year], key=lambda e: (-e.popularity, e.item_id),
        )
        ranked.extend(entries[:top_n])
    return ranked


def build_report(
    ranked: Iterable[ItemPopularity], names: Mapping[ItemId, str],
) -> list[PopularItemReport]:
    return [
        PopularItemReport(
            year=entry.year,
            item_name=names.get(entry.item_id, UNKNOWN_ITEM_NAME),
            purchase_count=entry.popularity,
        )
        for entry in ranked
    ]
