from __future__ import annotations

from itertools import count
from typing import Any, Iterable, Mapping

from django.core.cache.backends.locmem import LocMemCache

from apps.navigation.cache import VersionedCache
from apps.navigation.exceptions import DuplicateRowError, RowStoreError
from apps.navigation.models import PageKind
from apps.navigation.rows import PageRow


class InMemoryRowStore:
    """RowStore double that enforces the same unique constraints as the database."""

    def __init__(self, rows: Iterable[PageRow] = (), legacy_items: Iterable[dict[str, Any]] = ()) -> None:
        self.rows: dict[int, PageRow] = {row.id: row for row in rows}
        self.legacy_items = list(legacy_items)
        self._ids = count(max(self.rows, default=0) + 1)
        self.creates = 0
        self.updates = 0
        self.reads = 0
        self.fail_reads = False
        self.reject_create: set[tuple[str, str]] = set()

    @property
    def writes(self) -> int:
        return self.creates + self.updates

    def find_all_rows(self) -> list[PageRow]:
        self.reads += 1
        if self.fail_reads:
            raise RowStoreError("store unavailable")
        return sorted(self.rows.values(), key=lambda row: (row.parent_id or 0, row.order, row.id))

    def find_group_row(self, group_id: str, locale: str) -> PageRow | None:
        for row in self.rows.values():
            if row.group_id == group_id and row.locale == locale:
                return row
        return None

    def _check_unique(self, candidate: PageRow) -> None:
        for row in self.rows.values():
            if row.id == candidate.id or row.locale != candidate.locale:
                continue
            if candidate.slug is not None and row.slug == candidate.slug:
                raise DuplicateRowError(f"slug {candidate.slug!r} taken in {candidate.locale}")
            if candidate.group_id and row.group_id == candidate.group_id:
                raise DuplicateRowError(f"group {candidate.group_id!r} already has {candidate.locale}")

    def create_row(self, data: Mapping[str, Any]) -> PageRow:
        if (data.get("group_id"), data.get("locale")) in self.reject_create:
            raise DuplicateRowError("rejected")
        row = PageRow.from_mapping({**data, "id": next(self._ids)})
        self._check_unique(row)
        self.rows[row.id] = row
        self.creates += 1
        return row

    def update_row(self, row_id: int, patch: Mapping[str, Any]) -> None:
        updated = self.rows[row_id].with_changes(**patch)
        self._check_unique(updated)
        self.rows[row_id] = updated
        self.updates += 1

    def batch_update(self, updates: Iterable[tuple[int, Mapping[str, Any]]]) -> None:
        for row_id, patch in updates:
            self.update_row(row_id, patch)

    def find_legacy_items(self) -> list[dict[str, Any]]:
        return list(self.legacy_items)


def make_row(row_id: int, locale: str = "bg", **values: Any) -> PageRow:
    values.setdefault("group_id", f"g{row_id}")
    values.setdefault("parent_id", None)
    values.setdefault("order", 0)
    values.setdefault("slug", f"page-{row_id}")
    kind = values.pop("kind", PageKind.PAGE)
    return PageRow(id=row_id, locale=locale, kind=PageKind(kind), **values)


_cache_names = count(1)


def new_locmem(label: str) -> LocMemCache:
    # LocMemCache instances with the same name share storage.
    return LocMemCache(f"nav-tests-{label}-{next(_cache_names)}", {})


def make_cache(shared: LocMemCache | None = None, **kwargs: Any) -> VersionedCache:
    """A VersionedCache with its own local tier; share ``shared`` to simulate another process."""

    return VersionedCache(shared=shared or new_locmem("shared"), local=new_locmem("local"), **kwargs)
