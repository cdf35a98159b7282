from __future__ import annotations

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.navigation.cache import reset_navigation_cache
from apps.navigation.exceptions import RowStoreError
from apps.navigation.models import Page, PageKind


class NavigationApiTestCase(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        reset_navigation_cache()
        self.addCleanup(reset_navigation_cache)
        self.on_commit_patch = patch("apps.navigation.authoring.transaction.on_commit", lambda fn: fn())
        self.on_commit_patch.start()
        self.addCleanup(self.on_commit_patch.stop)
        self.staff = get_user_model().objects.create_user("editor", password="secret", is_staff=True)

    def _page(self, group_id: str, locale: str = "bg", **values) -> Page:
        values.setdefault("slug", group_id)
        return Page.objects.create(group_id=group_id, locale=locale, **values)


class NavigationTreeApiTests(NavigationApiTestCase):
    def test_public_tree(self) -> None:
        school = self._page("school", nav_label="Училището")
        self._page("team", parent=school, slug="ekip")
        self._page("secret", access_role="ADMIN", order=1)

        response = self.client.get(reverse("navigation:tree"), {"locale": "bg"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        payload = response.json()
        self.assertFalse(payload["legacy"])
        self.assertEqual([item["label"] for item in payload["items"]], ["Училището"])
        self.assertEqual(payload["items"][0]["children"][0]["href"], "/school/ekip")

    def test_staff_gets_admin_role(self) -> None:
        self._page("secret", access_role="ADMIN")
        self.client.force_authenticate(self.staff)

        response = self.client.get(reverse("navigation:tree"))

        self.assertEqual([item["href"] for item in response.json()["items"]], ["/secret"])

    def test_folder_has_no_href_key(self) -> None:
        self._page("folder", kind=PageKind.FOLDER)

        item = self.client.get(reverse("navigation:tree")).json()["items"][0]

        self.assertNotIn("href", item)
        self.assertEqual(item["kind"], "FOLDER")

    def test_store_failure_returns_500(self) -> None:
        with patch(
            "apps.navigation.store.DjangoRowStore.find_all_rows", side_effect=RowStoreError("db down")
        ), self.assertLogs("navigation.api", level="ERROR"):
            response = self.client.get(reverse("navigation:tree"))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {"error": "Internal server error"})

    def test_refresh_is_ignored_for_anonymous_users(self) -> None:
        self._page("home")
        self.client.get(reverse("navigation:tree"))
        Page.objects.filter(locale="bg").update(nav_label="Начало")

        anonymous = self.client.get(reverse("navigation:tree"), {"refresh": "1"}).json()
        self.client.force_authenticate(self.staff)
        staff = self.client.get(reverse("navigation:tree"), {"refresh": "1"}).json()

        self.assertEqual(anonymous["items"][0]["label"], "home")
        self.assertEqual(staff["items"][0]["label"], "Начало")


class LocaleSwitchApiTests(NavigationApiTestCase):
    def test_locale_path(self) -> None:
        school_bg = self._page("school", slug="uchilishteto")
        school_en = self._page("school", locale="en", slug="school")
        self._page("team", parent=school_bg, slug="ekip")
        self._page("team", locale="en", parent=school_en, slug="team")

        response = self.client.get(
            reverse("navigation:locale-path"), {"from": "bg", "to": "en", "path": "/uchilishteto/ekip"}
        )

        self.assertEqual(response.json(), {"target": "school/team"})

    def test_locale_path_without_match(self) -> None:
        response = self.client.get(reverse("navigation:locale-path"), {"from": "bg", "to": "en", "path": "nope"})

        self.assertEqual(response.json(), {"target": None})

    def test_route_alias(self) -> None:
        self._page("news", slug="novini", kind=PageKind.ROUTE, route_path="pages/news/[...slug]", route_override="novini")

        response = self.client.get(reverse("navigation:route-alias"), {"locale": "bg", "path": "novini/2024/first"})

        self.assertEqual(response.json(), {"target": "news/2024/first"})


class AdminApiTests(NavigationApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client.force_authenticate(self.staff)

    def test_admin_endpoints_require_staff(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(reverse("navigation:admin-pages"))

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_create_and_list_groups(self) -> None:
        response = self.client.post(
            reverse("navigation:admin-pages"), {"slug": "about", "nav_label": "За нас"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        group_id = response.json()["group_id"]
        listing = self.client.get(reverse("navigation:admin-pages")).json()["items"]
        self.assertEqual(listing[0]["group_id"], group_id)
        self.assertEqual(set(listing[0]["ids_by_locale"]), {"bg", "en"})

    def test_flat_listing(self) -> None:
        self._page("home")

        items = self.client.get(reverse("navigation:admin-pages"), {"flat": "1"}).json()["items"]

        self.assertEqual(items[0]["slug"], "home")
        self.assertEqual(items[0]["group_id"], "home")

    def test_create_validation_errors(self) -> None:
        response = self.client.post(reverse("navigation:admin-pages"), {"kind": "LINK"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("external_url", response.json())

    def test_create_duplicate_slug_is_bad_request(self) -> None:
        self.client.post(reverse("navigation:admin-pages"), {"slug": "dup"}, format="json")

        response = self.client.post(reverse("navigation:admin-pages"), {"slug": "dup"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self) -> None:
        page = self._page("about")
        url = reverse("navigation:admin-page-detail", args=[page.pk])

        response = self.client.put(url, {"visible": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        page.refresh_from_db()
        self.assertFalse(page.visible)

        response = self.client.delete(url)
        self.assertEqual(response.json(), {"ok": True, "deleted": 1})
        self.assertFalse(Page.objects.exists())

    def test_update_missing_page(self) -> None:
        url = reverse("navigation:admin-page-detail", args=[999])

        self.assertEqual(self.client.put(url, {"visible": True}, format="json").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_empty_update_is_rejected(self) -> None:
        page = self._page("about")

        response = self.client.put(reverse("navigation:admin-page-detail", args=[page.pk]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reorder(self) -> None:
        first = self._page("a", order=0)
        second = self._page("b", order=1)

        response = self.client.post(reverse("navigation:admin-reorder"), {"ids": [second.pk, first.pk]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        first.refresh_from_db()
        self.assertEqual(first.order, 1)

    def test_reorder_store_failure_returns_500(self) -> None:
        first = self._page("a", order=0)

        with patch(
            "apps.navigation.store.DjangoRowStore.batch_update", side_effect=RowStoreError("db down")
        ), self.assertLogs("navigation.api", level="ERROR"):
            response = self.client.post(reverse("navigation:admin-reorder"), {"ids": [first.pk]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_invalidate(self) -> None:
        response = self.client.post(reverse("navigation:admin-invalidate"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.json()["version"].startswith("v"))
