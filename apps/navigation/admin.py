from __future__ import annotations

from django.contrib import admin
from django.db import transaction

from .models import LegacyNavigationItem, Page
from .services import invalidate_navigation_tree


def _invalidate_on_commit() -> None:
    transaction.on_commit(invalidate_navigation_tree)


@admin.action(description="Invalidate navigation cache")
def invalidate_navigation_cache(modeladmin, request, queryset):
    version = invalidate_navigation_tree()
    modeladmin.message_user(request, f"Navigation cache invalidated (version {version}).")


class InvalidatingAdminMixin:
    """Schedules a navigation cache invalidation after every admin write."""

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        _invalidate_on_commit()

    def delete_model(self, request, obj):
        super().delete_model(request, obj)
        _invalidate_on_commit()

    def delete_queryset(self, request, queryset):
        super().delete_queryset(request, queryset)
        _invalidate_on_commit()


@admin.register(Page)
class PageAdmin(InvalidatingAdminMixin, admin.ModelAdmin):
    list_display = ("__str__", "locale", "kind", "group_id", "parent", "order", "visible", "published", "access_role")
    list_filter = ("locale", "kind", "visible", "published")
    search_fields = ("slug", "nav_label", "title", "group_id", "route_override")
    list_select_related = ("parent",)
    raw_id_fields = ("parent",)
    ordering = ("locale", "parent_id", "order", "id")
    readonly_fields = ("created_at", "updated_at")
    actions = [invalidate_navigation_cache]


@admin.register(LegacyNavigationItem)
class LegacyNavigationItemAdmin(InvalidatingAdminMixin, admin.ModelAdmin):
    list_display = ("__str__", "parent", "order", "external_url")
    search_fields = ("slug",)
    raw_id_fields = ("parent",)
    actions = [invalidate_navigation_cache]
