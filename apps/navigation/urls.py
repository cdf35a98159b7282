from django.urls import path

from .views import (
    AdminInvalidateView,
    AdminPageDetailView,
    AdminPageListView,
    AdminReorderView,
    LocalePathView,
    NavigationTreeView,
    RouteAliasView,
)

app_name = "navigation"

urlpatterns = [
    path("", NavigationTreeView.as_view(), name="tree"),
    path("locale-path/", LocalePathView.as_view(), name="locale-path"),
    path("route-alias/", RouteAliasView.as_view(), name="route-alias"),
    path("admin/pages/", AdminPageListView.as_view(), name="admin-pages"),
    path("admin/pages/<int:pk>/", AdminPageDetailView.as_view(), name="admin-page-detail"),
    path("admin/reorder/", AdminReorderView.as_view(), name="admin-reorder"),
    path("admin/invalidate/", AdminInvalidateView.as_view(), name="admin-invalidate"),
]
