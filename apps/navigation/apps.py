from __future__ import annotations

from django.apps import AppConfig


class NavigationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.navigation"
    label = "navigation"
    verbose_name = "Site navigation"
