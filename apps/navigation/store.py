"""Row store access: the only place the navigation build touches the database."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol

from django.db import DatabaseError, IntegrityError, transaction

from .exceptions import DuplicateRowError, RowStoreError
from .models import LegacyNavigationItem, Page
from .rows import PageRow

logger = logging.getLogger("navigation.store")

_ROW_FIELDS = (
    "id",
    "group_id",
    "parent_id",
    "order",
    "locale",
    "slug",
    "external_url",
    "route_path",
    "route_override",
    "nav_label",
    "kind",
    "visible",
    "access_role",
    "title",
    "published",
)

_WRITABLE_FIELDS = frozenset(_ROW_FIELDS) - {"id"}


class RowStore(Protocol):
    def find_all_rows(self) -> list[PageRow]: ...

    def find_group_row(self, group_id: str, locale: str) -> PageRow | None: ...

    def create_row(self, data: Mapping[str, Any]) -> PageRow: ...

    def update_row(self, row_id: int, patch: Mapping[str, Any]) -> None: ...

    def batch_update(self, updates: Iterable[tuple[int, Mapping[str, Any]]]) -> None: ...

    def find_legacy_items(self) -> list[dict[str, Any]]: ...


def _clean_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(patch) - _WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown page fields: {sorted(unknown)}")
    return dict(patch)


class DjangoRowStore:
    """RowStore backed by the ``Page`` model."""

    def find_all_rows(self) -> list[PageRow]:
        try:
            values = list(Page.objects.order_by("parent_id", "order", "id").values(*_ROW_FIELDS))
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to read navigation rows: {exc}") from exc
        return [PageRow.from_mapping(item) for item in values]

    def find_group_row(self, group_id: str, locale: str) -> PageRow | None:
        try:
            item = Page.objects.filter(group_id=group_id, locale=locale).values(*_ROW_FIELDS).first()
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to read group {group_id!r}: {exc}") from exc
        return PageRow.from_mapping(item) if item else None

    def create_row(self, data: Mapping[str, Any]) -> PageRow:
        values = _clean_patch(data)
        try:
            # Savepoint so a unique violation leaves the caller's transaction usable.
            with transaction.atomic():
                page = Page.objects.create(**values)
        except IntegrityError as exc:
            raise DuplicateRowError(
                f"Duplicate page row (slug={values.get('slug')!r}, locale={values.get('locale')!r})"
            ) from exc
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to create navigation row: {exc}") from exc
        return PageRow.from_mapping({name: getattr(page, name) for name in _ROW_FIELDS})

    def update_row(self, row_id: int, patch: Mapping[str, Any]) -> None:
        values = _clean_patch(patch)
        if not values:
            return
        try:
            with transaction.atomic():
                Page.objects.filter(pk=row_id).update(**values)
        except IntegrityError as exc:
            raise DuplicateRowError(f"Update of page {row_id} violates a unique constraint") from exc
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to update navigation row {row_id}: {exc}") from exc

    def batch_update(self, updates: Iterable[tuple[int, Mapping[str, Any]]]) -> None:
        """Apply several row patches in one transaction (all or nothing)."""

        prepared = [(row_id, _clean_patch(patch)) for row_id, patch in updates]
        try:
            with transaction.atomic():
                for row_id, values in prepared:
                    if values:
                        Page.objects.filter(pk=row_id).update(**values)
        except IntegrityError as exc:
            raise DuplicateRowError("Batch update violates a unique constraint") from exc
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to apply batch update: {exc}") from exc
        logger.debug("nav_batch_update rows=%s", len(prepared))

    def find_legacy_items(self) -> list[dict[str, Any]]:
        try:
            return list(
                LegacyNavigationItem.objects.order_by("parent_id", "order", "id").values(
                    "id", "parent_id", "slug", "labels", "external_url", "order"
                )
            )
        except DatabaseError as exc:
            raise RowStoreError(f"Unable to read legacy navigation items: {exc}") from exc
