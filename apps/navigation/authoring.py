"""
Authoring writes against navigation pages.

Every operation runs in one transaction and schedules a cache invalidation
for after the commit, so readers never rebuild from uncommitted rows.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Mapping, Sequence

from django.db import IntegrityError, transaction

from . import conf as nav_conf
from .exceptions import AuthoringError, PageNotFoundError
from .models import Page, PageKind
from .services import invalidate_navigation_tree
from .store import DjangoRowStore, RowStore

logger = logging.getLogger("navigation.authoring")

APPEND_ORDER = 9999

STRUCTURAL_FIELDS = ("parent_id", "order", "kind", "visible", "external_url")
LOCALE_FIELDS = ("slug", "nav_label", "access_role", "route_path", "route_override")


def _invalidate_after_commit() -> None:
    invalidate_navigation_tree()
    if nav_conf.warm_after_invalidate():
        from apps.navigation.tasks import warm_navigation_cache  # inline import to avoid cycles

        warm_navigation_cache.delay()


def schedule_invalidation() -> None:
    transaction.on_commit(_invalidate_after_commit)


def new_group_id() -> str:
    return f"G|{uuid.uuid4()}"


def _get_page(page_id: int) -> Page:
    try:
        return Page.objects.get(pk=page_id)
    except Page.DoesNotExist as exc:
        raise PageNotFoundError(f"Page {page_id} does not exist") from exc


def _group_of(page: Page) -> str:
    return page.group_id or str(page.pk)


def _row_in_group(group_id: str | None, locale: str) -> Page | None:
    if not group_id:
        return None
    return Page.objects.filter(group_id=group_id, locale=locale).first()


def _parent_id_for(parent_group_id: str | None, locale: str) -> int | None:
    parent = _row_in_group(parent_group_id, locale)
    return parent.pk if parent is not None else None


def _validate_kind(kind: str, data: Mapping[str, Any]) -> PageKind:
    try:
        value = PageKind(kind or PageKind.PAGE)
    except ValueError as exc:
        raise AuthoringError(f"Unknown page kind {kind!r}") from exc
    if value is PageKind.LINK and not data.get("external_url"):
        raise AuthoringError("External URL required for LINK")
    if value is PageKind.ROUTE and not data.get("route_path"):
        raise AuthoringError("route_path required for ROUTE")
    if value not in (PageKind.LINK, PageKind.ROUTE) and not (data.get("slug") or "").strip():
        raise AuthoringError("Slug segment required")
    return value


def normalize_sibling_orders(parent_id: int | None, locale: str, *, pinned: int | None = None) -> int:
    """
    Renumber the siblings under ``parent_id`` in ``locale`` as 0..n-1, keeping their order.

    ``pinned`` wins ties, so a page just given an order lands in front of the
    sibling that already held it.
    """

    siblings = sorted(
        Page.objects.filter(parent_id=parent_id, locale=locale).only("id", "order"),
        key=lambda page: (page.order, page.pk != pinned, page.pk),
    )
    changed = [page for index, page in enumerate(siblings) if page.order != index]
    for index, page in enumerate(siblings):
        page.order = index
    if changed:
        Page.objects.bulk_update(changed, ["order"])
    return len(changed)


def create_page_group(data: Mapping[str, Any], *, locales: Sequence[str] | None = None) -> str:
    """Create one row per locale sharing a new group id; returns the group id."""

    kind = _validate_kind(data.get("kind") or PageKind.PAGE, data)
    targets = list(dict.fromkeys(locales or nav_conf.locales()))
    parent_group_id = None
    if data.get("parent_id"):
        parent_group_id = _group_of(_get_page(data["parent_id"]))

    group_id = new_group_id()
    slug = (data.get("slug") or "").strip() or None
    try:
        with transaction.atomic():
            for locale in targets:
                parent_id = _parent_id_for(parent_group_id, locale)
                Page.objects.create(
                    group_id=group_id,
                    locale=locale,
                    parent_id=parent_id,
                    slug=None if kind is PageKind.LINK else slug,
                    external_url=data.get("external_url") if kind is PageKind.LINK else None,
                    route_path=data.get("route_path") if kind is PageKind.ROUTE else None,
                    route_override=data.get("route_override") or None,
                    nav_label=data.get("nav_label"),
                    kind=kind,
                    visible=data.get("visible", True),
                    access_role=data.get("access_role") or None,
                    order=APPEND_ORDER,
                    title=data.get("nav_label") or slug or "Untitled",
                    published=True,
                )
                normalize_sibling_orders(parent_id, locale)
            schedule_invalidation()
    except IntegrityError as exc:
        raise AuthoringError(f"Slug {slug!r} is already used in one of {targets}") from exc
    logger.info("nav_group_created group=%s kind=%s locales=%s", group_id, kind, ",".join(targets))
    return group_id


def _subtree_ids(page: Page) -> set[int]:
    children_of: dict[int | None, list[int]] = {}
    for pk, parent_id in Page.objects.values_list("id", "parent_id"):
        children_of.setdefault(parent_id, []).append(pk)
    seen: set[int] = set()
    stack = [page.pk]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        stack.extend(children_of.get(current, ()))
    return seen


def update_page(page_id: int, changes: Mapping[str, Any]) -> None:
    """
    Apply ``changes`` to a page.

    Structural fields go to every locale row of the group, with ``parent_id``
    mapped onto each locale's row of the new parent group. Locale fields only
    touch the targeted row.
    """

    unknown = set(changes) - set(STRUCTURAL_FIELDS) - set(LOCALE_FIELDS)
    if unknown:
        raise AuthoringError(f"Unknown fields: {sorted(unknown)}")

    page = _get_page(page_id)
    group_id = _group_of(page)
    structural = {key: changes[key] for key in STRUCTURAL_FIELDS if key in changes}
    per_locale = {key: changes[key] for key in LOCALE_FIELDS if key in changes}
    if "kind" in structural:
        try:
            structural["kind"] = PageKind(structural["kind"])
        except ValueError as exc:
            raise AuthoringError(f"Unknown page kind {structural['kind']!r}") from exc
    if {"kind", "external_url", "route_path", "slug"} & set(changes):
        merged = {
            "external_url": page.external_url,
            "route_path": page.route_path,
            "slug": page.slug,
            **structural,
            **per_locale,
        }
        _validate_kind(structural.get("kind", page.kind), merged)

    moving = "parent_id" in structural
    new_parent_group = None
    if moving and structural["parent_id"]:
        new_parent = _get_page(structural["parent_id"])
        if new_parent.pk in _subtree_ids(page):
            raise AuthoringError("A page cannot be moved under itself")
        new_parent_group = _group_of(new_parent)

    members = list(Page.objects.filter(group_id=group_id)) if page.group_id else [page]
    try:
        with transaction.atomic():
            for member in members:
                values = dict(structural)
                if moving:
                    values["parent_id"] = _parent_id_for(new_parent_group, member.locale)
                if member.pk == page.pk:
                    values.update(per_locale)
                if values:
                    Page.objects.filter(pk=member.pk).update(**values)
            if moving or "order" in structural:
                pinned_order = "order" in structural
                for member in members:
                    # ``member`` still carries its parent from before the update.
                    target_parent = _parent_id_for(new_parent_group, member.locale) if moving else member.parent_id
                    normalize_sibling_orders(
                        target_parent, member.locale, pinned=member.pk if pinned_order else None
                    )
                    if moving:
                        normalize_sibling_orders(member.parent_id, member.locale)
            schedule_invalidation()
    except IntegrityError as exc:
        raise AuthoringError(f"Update of page {page_id} conflicts with an existing page") from exc
    logger.info(
        "nav_page_updated id=%s group=%s structural=%s locale_fields=%s",
        page_id,
        group_id,
        ",".join(sorted(structural)) or "-",
        ",".join(sorted(per_locale)) or "-",
    )


def delete_page_subtree(page_id: int) -> int:
    """Delete the page's subtree in every locale; returns the number of rows removed."""

    page = _get_page(page_id)
    ids = _subtree_ids(page)
    groups = {gid for gid in Page.objects.filter(pk__in=ids).values_list("group_id", flat=True) if gid}
    with transaction.atomic():
        deleted, _ = Page.objects.filter(pk__in=ids).delete()
        if groups:
            extra, _ = Page.objects.filter(group_id__in=groups).delete()
            deleted += extra
        schedule_invalidation()
    logger.info("nav_subtree_deleted id=%s groups=%s rows=%s", page_id, len(groups), deleted)
    return deleted


def reorder_siblings(ordered_ids: Iterable[int], *, store: RowStore | None = None) -> None:
    """
    Give the listed pages orders 0..n-1, mirrored onto every locale of their groups.

    All rows go through one ``batch_update``, so a failure leaves every order as it was.
    """

    store = store or DjangoRowStore()
    ordered_ids = list(ordered_ids)
    pages = Page.objects.in_bulk(ordered_ids)
    missing = [pk for pk in ordered_ids if pk not in pages]
    if missing:
        raise PageNotFoundError(f"Pages {missing} do not exist")
    parents = {(pages[pk].parent_id, pages[pk].locale) for pk in ordered_ids}
    if len(parents) > 1:
        raise AuthoringError("Reordered pages must share one parent and locale")

    members_of: dict[str, list[int]] = {}
    group_ids = {page.group_id for page in pages.values() if page.group_id}
    for member_id, member_group in Page.objects.filter(group_id__in=group_ids).values_list("id", "group_id"):
        members_of.setdefault(member_group, []).append(member_id)

    updates = []
    for index, pk in enumerate(ordered_ids):
        group_id = pages[pk].group_id
        for member_id in members_of.get(group_id) or [pk]:
            updates.append((member_id, {"order": index}))

    with transaction.atomic():
        store.batch_update(updates)
        schedule_invalidation()
    logger.info("nav_siblings_reordered count=%s rows=%s", len(ordered_ids), len(updates))
