"""
Locale coverage: every navigation group gets exactly one row per configured locale.

Missing locale variants are cloned from a template row of the same group and
persisted, parents before children, so the synthesized child can always point
at a same-locale parent. Running the pass again without structural changes
performs no writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .exceptions import DuplicateRowError, SlugAllocationError
from .rows import CLONED_FIELDS, PageRow
from .store import RowStore

logger = logging.getLogger("navigation.coverage")

MAX_SLUG_ATTEMPTS = 100


@dataclass(slots=True)
class _GroupInfo:
    group_id: str
    members: list[PageRow] = field(default_factory=list)
    parent_group_id: str | None = None
    first_seen: int = 0

    def by_locale(self) -> dict[str, PageRow]:
        mapping: dict[str, PageRow] = {}
        for row in self.members:
            mapping.setdefault(row.locale, row)
        return mapping


@dataclass(slots=True)
class CoverageReport:
    healed: int = 0
    created: int = 0
    adopted: int = 0
    failed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.healed or self.created or self.adopted)


def slug_candidates(slug: str, locale: str) -> Iterable[str]:
    """``slug``, then ``slug-<locale>``, then ``slug-<locale>-2``, ``-3`` ..."""

    yield slug
    yield f"{slug}-{locale}"
    attempt = 2
    while True:
        yield f"{slug}-{locale}-{attempt}"
        attempt += 1


def heal_group_ids(store: RowStore, rows: Sequence[PageRow]) -> tuple[list[PageRow], int]:
    """Give every row without ``group_id`` a group of its own (its own id)."""

    healed: list[PageRow] = []
    count = 0
    for row in rows:
        if row.group_id:
            healed.append(row)
            continue
        group_id = str(row.id)
        store.update_row(row.id, {"group_id": group_id})
        healed.append(row.with_changes(group_id=group_id))
        count += 1
    if count:
        logger.info("nav_group_ids_healed count=%s", count)
    return healed, count


def _collect_groups(rows: Sequence[PageRow]) -> dict[str, _GroupInfo]:
    by_id = {row.id: row for row in rows}
    groups: dict[str, _GroupInfo] = {}
    for index, row in enumerate(rows):
        gid = row.effective_group_id
        info = groups.get(gid)
        if info is None:
            info = groups[gid] = _GroupInfo(group_id=gid, first_seen=index)
        info.members.append(row)
    for row in rows:
        info = groups[row.effective_group_id]
        if info.parent_group_id is not None or row.parent_id is None:
            continue
        parent = by_id.get(row.parent_id)
        if parent is not None and parent.effective_group_id != info.group_id:
            info.parent_group_id = parent.effective_group_id
    return groups


def _group_depths(groups: dict[str, _GroupInfo]) -> dict[str, int]:
    depths: dict[str, int] = {}
    visiting: set[str] = set()

    def depth(gid: str) -> int:
        if gid in depths:
            return depths[gid]
        info = groups.get(gid)
        parent = info.parent_group_id if info else None
        if parent is None or parent not in groups or gid in visiting:
            # Roots, dangling parents and cycles all count as top level.
            depths[gid] = 0
            return 0
        visiting.add(gid)
        try:
            value = 1 + depth(parent)
        finally:
            visiting.discard(gid)
        depths[gid] = value
        return value

    for gid in groups:
        depth(gid)
    return depths


def _pick_template(info: _GroupInfo, default_locale: str) -> PageRow:
    for row in info.members:
        if row.locale == default_locale:
            return row
    return info.members[0]


class LocaleCoverageGuarantor:
    """Synthesizes and persists missing locale variants of navigation groups."""

    def __init__(self, store: RowStore, *, locales: Sequence[str], default_locale: str) -> None:
        self.store = store
        self.locales = list(dict.fromkeys(locales))
        self.default_locale = default_locale
        self.report = CoverageReport()

    def ensure(self, rows: Sequence[PageRow]) -> list[PageRow]:
        if not rows:
            return []
        rows, healed = heal_group_ids(self.store, rows)
        self.report.healed += healed

        groups = _collect_groups(rows)
        depths = _group_depths(groups)
        taken: set[tuple[str, str]] = {(row.slug, row.locale) for row in rows if row.slug}
        locale_maps: dict[str, dict[str, PageRow]] = {gid: info.by_locale() for gid, info in groups.items()}

        ordered = sorted(groups.values(), key=lambda info: (depths[info.group_id], info.first_seen))
        for info in ordered:
            present = locale_maps[info.group_id]
            missing = [locale for locale in self.locales if locale not in present]
            if not missing:
                continue
            template = _pick_template(info, self.default_locale)
            for locale in missing:
                try:
                    row = self._synthesize(info, template, locale, locale_maps, taken)
                except (SlugAllocationError, DuplicateRowError) as exc:
                    self.report.failed += 1
                    logger.error(
                        "nav_locale_synthesis_failed group=%s locale=%s error=%s",
                        info.group_id,
                        locale,
                        exc,
                    )
                    continue
                present[locale] = row

        if self.report.changed:
            logger.info(
                "nav_locale_coverage_written healed=%s created=%s adopted=%s failed=%s",
                self.report.healed,
                self.report.created,
                self.report.adopted,
                self.report.failed,
            )
            return self.store.find_all_rows()
        return list(rows)

    def _resolve_parent(
        self,
        info: _GroupInfo,
        locale: str,
        locale_maps: dict[str, dict[str, PageRow]],
    ) -> int | None:
        if info.parent_group_id is None:
            return None
        parent_row = locale_maps.get(info.parent_group_id, {}).get(locale)
        if parent_row is None:
            logger.warning(
                "nav_locale_parent_missing group=%s parent_group=%s locale=%s",
                info.group_id,
                info.parent_group_id,
                locale,
            )
            return None
        return parent_row.id

    def _synthesize(
        self,
        info: _GroupInfo,
        template: PageRow,
        locale: str,
        locale_maps: dict[str, dict[str, PageRow]],
        taken: set[tuple[str, str]],
    ) -> PageRow:
        data = {name: getattr(template, name) for name in CLONED_FIELDS}
        data.update(
            locale=locale,
            group_id=info.group_id,
            parent_id=self._resolve_parent(info, locale, locale_maps),
        )

        base_slug = (template.slug or "").strip()
        if not base_slug:
            data["slug"] = None
            return self._create(info, locale, data)

        candidates = slug_candidates(base_slug, locale)
        for _ in range(MAX_SLUG_ATTEMPTS):
            slug = next(candidates)
            if (slug, locale) in taken:
                continue
            data["slug"] = slug
            try:
                row = self._create(info, locale, data)
            except DuplicateRowError:
                taken.add((slug, locale))
                continue
            taken.add((slug, locale))
            return row
        raise SlugAllocationError(
            f"No free slug for {base_slug!r} in locale {locale!r} after {MAX_SLUG_ATTEMPTS} attempts"
        )

    def _create(self, info: _GroupInfo, locale: str, data: dict) -> PageRow:
        try:
            row = self.store.create_row(data)
        except DuplicateRowError:
            existing = self.store.find_group_row(info.group_id, locale)
            if existing is None:
                raise
            # Another request healed this group concurrently.
            self.report.adopted += 1
            logger.info("nav_locale_synthesis_raced group=%s locale=%s", info.group_id, locale)
            return existing
        self.report.created += 1
        logger.debug(
            "nav_locale_row_synthesized group=%s locale=%s id=%s slug=%s",
            info.group_id,
            locale,
            row.id,
            row.slug,
        )
        return row


def ensure_locale_coverage(
    store: RowStore,
    rows: Sequence[PageRow] | None = None,
    *,
    locales: Sequence[str],
    default_locale: str,
) -> list[PageRow]:
    """Return a locale-complete row set, writing any missing rows to ``store``."""

    if rows is None:
        rows = store.find_all_rows()
    return LocaleCoverageGuarantor(store, locales=locales, default_locale=default_locale).ensure(rows)
