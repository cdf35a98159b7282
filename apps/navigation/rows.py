"""Plain value types flowing through the navigation build pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from .models import PageKind

# Fields copied from a template row when a missing locale variant is synthesized.
CLONED_FIELDS: tuple[str, ...] = (
    "external_url",
    "route_path",
    "route_override",
    "nav_label",
    "kind",
    "visible",
    "order",
    "access_role",
    "title",
    "published",
)


@dataclass(frozen=True, slots=True)
class PageRow:
    id: int
    group_id: str | None
    parent_id: int | None
    order: int
    locale: str
    slug: str | None = None
    external_url: str | None = None
    route_path: str | None = None
    route_override: str | None = None
    nav_label: str | None = None
    kind: PageKind = PageKind.PAGE
    visible: bool = True
    access_role: str | None = None
    title: str = ""
    published: bool = True

    @property
    def effective_group_id(self) -> str:
        return self.group_id or str(self.id)

    def with_changes(self, **changes: Any) -> "PageRow":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PageRow":
        names = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in names}
        values["kind"] = PageKind(values.get("kind") or PageKind.PAGE)
        return cls(**values)


@dataclass(slots=True)
class TreeNode:
    """One group in the assembled tree, carrying its representative row."""

    group_id: str
    row: PageRow
    order: int
    ids_by_locale: dict[str, int] = field(default_factory=dict)
    slug_by_locale: dict[str, str | None] = field(default_factory=dict)
    label_by_locale: dict[str, str | None] = field(default_factory=dict)
    route_override_by_locale: dict[str, str | None] = field(default_factory=dict)
    route_path_by_locale: dict[str, str | None] = field(default_factory=dict)
    external_url_by_locale: dict[str, str | None] = field(default_factory=dict)
    children: list["TreeNode"] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ResolvedNode:
    label: str
    href: str | None
    external: bool
    kind: PageKind
    children: tuple["ResolvedNode", ...] = ()

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "label": self.label,
            "external": self.external,
            "kind": str(self.kind.value),
            "children": [child.as_dict() for child in self.children],
        }
        if self.href is not None:
            payload["href"] = self.href
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResolvedNode":
        return cls(
            label=str(data.get("label") or ""),
            href=data.get("href"),
            external=bool(data.get("external", False)),
            kind=PageKind(data.get("kind") or PageKind.PAGE),
            children=tuple(cls.from_dict(child) for child in data.get("children") or ()),
        )


@dataclass(frozen=True, slots=True)
class NavigationResult:
    items: tuple[ResolvedNode, ...]
    legacy: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {"items": [item.as_dict() for item in self.items], "legacy": self.legacy}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NavigationResult":
        return cls(
            items=tuple(ResolvedNode.from_dict(item) for item in data.get("items") or ()),
            legacy=bool(data.get("legacy", False)),
        )
