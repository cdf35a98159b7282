"""Serializers for the navigation REST API."""

from __future__ import annotations

from rest_framework import serializers

from .models import Page, PageKind


class TreeQuerySerializer(serializers.Serializer):
    locale = serializers.CharField(required=False, allow_blank=True, max_length=10)
    refresh = serializers.BooleanField(required=False, default=False)


class LocalePathQuerySerializer(serializers.Serializer):
    # ``from`` is a keyword; the view maps the query parameter onto ``source``.
    source = serializers.CharField(required=False, allow_blank=True, max_length=10)
    to = serializers.CharField(required=False, allow_blank=True, max_length=10)
    path = serializers.CharField(required=False, allow_blank=True, default="")


class RouteAliasQuerySerializer(serializers.Serializer):
    locale = serializers.CharField(required=False, allow_blank=True, default="", max_length=10)
    path = serializers.CharField(required=False, allow_blank=True, default="")


class PageCreateSerializer(serializers.Serializer):
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    slug = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    external_url = serializers.URLField(required=False, allow_blank=True, allow_null=True, max_length=500)
    route_path = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    route_override = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    nav_label = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    kind = serializers.ChoiceField(choices=PageKind.choices, required=False, default=PageKind.PAGE)
    visible = serializers.BooleanField(required=False, default=True)
    access_role = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=64)
    locale = serializers.CharField(required=False, max_length=10)

    def validate(self, attrs):
        kind = attrs.get("kind") or PageKind.PAGE
        if kind == PageKind.LINK and not attrs.get("external_url"):
            raise serializers.ValidationError({"external_url": "External URL required for LINK"})
        if kind == PageKind.ROUTE and not attrs.get("route_path"):
            raise serializers.ValidationError({"route_path": "route_path required for ROUTE"})
        if kind not in (PageKind.LINK, PageKind.ROUTE) and not (attrs.get("slug") or "").strip():
            raise serializers.ValidationError({"slug": "Slug segment required"})
        return attrs


class PageUpdateSerializer(serializers.Serializer):
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    order = serializers.IntegerField(required=False, min_value=0)
    kind = serializers.ChoiceField(choices=PageKind.choices, required=False)
    visible = serializers.BooleanField(required=False)
    external_url = serializers.URLField(required=False, allow_blank=True, allow_null=True, max_length=500)
    slug = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    nav_label = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    access_role = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=64)
    route_path = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    route_override = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Missing body")
        return attrs


class ReorderSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class InvalidateSerializer(serializers.Serializer):
    locale = serializers.CharField(required=False, allow_blank=True, max_length=10)


class PageRowSerializer(serializers.ModelSerializer):
    class Meta:
        model = Page
        fields = (
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
        read_only_fields = fields
