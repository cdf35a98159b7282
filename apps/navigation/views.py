"""Views for the navigation API."""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from . import authoring, conf as nav_conf
from .assembly import build_grouped_tree
from .exceptions import AuthoringError, PageNotFoundError, RowStoreError
from .locale_paths import resolve_route_alias, translate_locale_path
from .models import Page
from .rows import TreeNode
from .serializers import (
    InvalidateSerializer,
    LocalePathQuerySerializer,
    PageCreateSerializer,
    PageRowSerializer,
    PageUpdateSerializer,
    ReorderSerializer,
    RouteAliasQuerySerializer,
    TreeQuerySerializer,
)
from .services import get_navigation_tree, invalidate_navigation_tree
from .store import DjangoRowStore

log_api = logging.getLogger("navigation.api")

INTERNAL_ERROR = {"error": "Internal server error"}


def request_role(request: Request) -> str | None:
    """Role used for ``access_role`` filtering; staff users get the admin role."""

    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated and user.is_staff:
        return nav_conf.admin_role()
    return None


def _internal_error(event: str, **context: Any) -> Response:
    log_api.exception(event, extra=context)
    return Response(INTERNAL_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class NavigationTreeView(APIView):
    """Public navigation tree for one locale."""

    permission_classes = [AllowAny]

    def get(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = TreeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        role = request_role(request)
        # Bypassing the cache is reserved to staff.
        refresh = serializer.validated_data["refresh"] and role is not None
        locale = serializer.validated_data.get("locale")
        try:
            result = get_navigation_tree(locale, force_refresh=refresh, role=role)
        except RowStoreError:
            return _internal_error("nav_tree_build_failed", locale=locale)
        return Response(result.as_dict())


class LocalePathView(APIView):
    """Equivalent path of the current page in another locale."""

    permission_classes = [AllowAny]

    def get(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        params = {
            "source": request.query_params.get("from", ""),
            "to": request.query_params.get("to", ""),
            "path": request.query_params.get("path", ""),
        }
        serializer = LocalePathQuerySerializer(data=params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            rows = DjangoRowStore().find_all_rows()
        except RowStoreError:
            return _internal_error("nav_locale_path_failed")
        target = translate_locale_path(
            rows,
            nav_conf.normalize_locale(data.get("source")),
            nav_conf.normalize_locale(data.get("to")),
            data.get("path"),
        )
        return Response({"target": target})


class RouteAliasView(APIView):
    """Internal route behind a ROUTE alias segment."""

    permission_classes = [AllowAny]

    def get(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = RouteAliasQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            rows = DjangoRowStore().find_all_rows()
        except RowStoreError:
            return _internal_error("nav_route_alias_failed")
        return Response({"target": resolve_route_alias(rows, data["locale"], data["path"])})


def _admin_node(node: TreeNode) -> dict[str, Any]:
    row = node.row
    return {
        "id": row.id,
        "group_id": node.group_id,
        "parent_id": row.parent_id,
        "order": node.order,
        "locale": row.locale,
        "slug": row.slug,
        "external_url": row.external_url,
        "route_path": row.route_path,
        "route_override": row.route_override,
        "nav_label": row.nav_label,
        "kind": str(row.kind.value),
        "visible": row.visible,
        "access_role": row.access_role,
        "ids_by_locale": dict(node.ids_by_locale),
        "slug_by_locale": dict(node.slug_by_locale),
        "label_by_locale": dict(node.label_by_locale),
        "route_override_by_locale": dict(node.route_override_by_locale),
        "children": [_admin_node(child) for child in node.children],
    }


class AdminPageListView(APIView):
    """Unfiltered grouped structure for editors, and group creation."""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        locale = request.query_params.get("locale")
        try:
            if request.query_params.get("flat"):
                pages = Page.objects.order_by("locale", "parent_id", "order", "id")
                if locale:
                    pages = pages.for_locale(nav_conf.normalize_locale(locale))
                return Response({"items": PageRowSerializer(pages, many=True).data})
            rows = DjangoRowStore().find_all_rows()
        except RowStoreError:
            return _internal_error("nav_admin_list_failed")
        tree = build_grouped_tree(
            rows,
            nav_conf.normalize_locale(locale),
            default_locale=nav_conf.default_locale(),
        )
        return Response({"items": [_admin_node(node) for node in tree]})

    def post(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = PageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        locale = data.pop("locale", None)
        locales = [nav_conf.normalize_locale(locale)] if locale else None
        try:
            group_id = authoring.create_page_group(data, locales=locales)
        except PageNotFoundError as exc:
            raise NotFound(detail=str(exc)) from exc
        except AuthoringError as exc:
            raise ValidationError({"detail": str(exc)}) from exc
        log_api.info("nav_admin_group_created group=%s user=%s", group_id, request.user.pk)
        return Response({"group_id": group_id}, status=status.HTTP_201_CREATED)


class AdminPageDetailView(APIView):
    permission_classes = [IsAdminUser]

    def put(self, request: Request, pk: int, *args: Any, **kwargs: Any) -> Response:
        serializer = PageUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            authoring.update_page(pk, serializer.validated_data)
        except PageNotFoundError as exc:
            raise NotFound(detail=str(exc)) from exc
        except AuthoringError as exc:
            raise ValidationError({"detail": str(exc)}) from exc
        return Response({"ok": True})

    def delete(self, request: Request, pk: int, *args: Any, **kwargs: Any) -> Response:
        try:
            deleted = authoring.delete_page_subtree(pk)
        except PageNotFoundError as exc:
            raise NotFound(detail=str(exc)) from exc
        log_api.info("nav_admin_subtree_deleted id=%s rows=%s user=%s", pk, deleted, request.user.pk)
        return Response({"ok": True, "deleted": deleted})


class AdminReorderView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = ReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            authoring.reorder_siblings(serializer.validated_data["ids"])
        except PageNotFoundError as exc:
            raise NotFound(detail=str(exc)) from exc
        except AuthoringError as exc:
            raise ValidationError({"ids": str(exc)}) from exc
        except RowStoreError:
            return _internal_error("nav_admin_reorder_failed")
        return Response({"ok": True})


class AdminInvalidateView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = InvalidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        version = invalidate_navigation_tree(serializer.validated_data.get("locale") or None)
        return Response({"version": version})
