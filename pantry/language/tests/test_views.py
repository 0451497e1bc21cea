from unittest import mock

from category.models import Category
from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from language.models import Language
from rest_framework import status
from rest_framework.test import APITestCase
from translation.models import Translation

User = get_user_model()


@override_settings(PANTRY_DEFAULT_LANGUAGE="en", TRANSLATION_REQUEST_DELAY=0, TRANSLATION_TASKS_INLINE=True)
class LanguageViewSetTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            username="admin",
            password="adminpass",
            is_staff=True,
            is_superuser=True,
        )
        cls.user = User.objects.create_user(
            username="user",
            password="userpass",
            is_staff=False,
            is_superuser=False,
        )

        cls.lang_en = Language.objects.create(code="en", name="English", active=True)
        cls.lang_fr = Language.objects.create(code="fr", name="French", active=True)
        cls.lang_es = Language.objects.create(code="es", name="Spanish", active=False)

    # -------------------------
    # helpers
    # -------------------------
    def _list_url(self):
        return reverse("api:lang-api:lang-list")

    def _detail_url(self, lang_or_id):
        lang_id = lang_or_id.id if hasattr(lang_or_id, "id") else int(lang_or_id)
        return reverse("api:lang-api:lang-detail", kwargs={"lang_id": lang_id})

    def _extract_items(self, resp_json):
        """
        Supporte réponse paginée ({"results": [...]}) ou non ([...]).
        """
        if isinstance(resp_json, dict) and "results" in resp_json:
            return resp_json["results"]
        return resp_json

    # -------------------------
    # permissions
    # -------------------------
    def test_list_requires_authentication(self):
        r = self.client.get(self._list_url())
        self.assertIn(r.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

        self.client.force_authenticate(user=self.user)
        r = self.client.get(self._list_url())
        self.assertEqual(r.status_code, status.HTTP_200_OK)

    def test_writes_require_admin(self):
        self.client.force_authenticate(user=self.user)

        r = self.client.post(self._list_url(), {"code": "de"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        r = self.client.patch(self._detail_url(self.lang_es), {"active": True}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        r = self.client.delete(self._detail_url(self.lang_fr))
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

        r = self.client.post(reverse("api:lang-api:lang-bulk-update"),
                             {"languages": [{"code": "es", "active": True}]}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    # -------------------------
    # list / retrieve
    # -------------------------
    def test_list_ordered_by_code(self):
        self.client.force_authenticate(user=self.user)
        r = self.client.get(self._list_url())

        codes = [it["code"] for it in self._extract_items(r.json())]
        self.assertEqual(codes, ["en", "es", "fr"])

    def test_filter_active(self):
        self.client.force_authenticate(user=self.user)
        r = self.client.get(self._list_url(), {"active": "false"})
        self.assertEqual([it["code"] for it in self._extract_items(r.json())], ["es"])

    def test_active_action(self):
        self.client.force_authenticate(user=self.user)
        r = self.client.get(reverse("api:lang-api:lang-active"))

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual([it["code"] for it in r.json()], ["en", "fr"])
        self.assertTrue(r.json()[0]["is_default"])

    def test_retrieve_404(self):
        self.client.force_authenticate(user=self.user)
        r = self.client.get(self._detail_url(999999))
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_on_code_or_name(self):
        self.client.force_authenticate(user=self.user)
        r = self.client.get(self._list_url(), {"search": "span"})
        self.assertEqual([it["code"] for it in self._extract_items(r.json())], ["es"])

    # -------------------------
    # create
    # -------------------------
    def test_admin_create_active_language_sweeps_entities(self):
        Category.objects.create(name="Grains")
        self.client.force_authenticate(user=self.admin)

        with mock.patch("translation.orchestrator.translate", return_value="Getreide") as tr:
            with self.captureOnCommitCallbacks(execute=True):
                r = self.client.post(self._list_url(), {"code": "  DE  "}, format="json")

        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.content)
        self.assertEqual(r.json()["code"], "de")
        self.assertEqual(r.json()["name"], "German")
        tr.assert_called_once_with("Grains", "de", "category")
        self.assertEqual(Translation.objects.get(language__code="de").translated_text, "Getreide")

    def test_create_duplicate_code_returns_400(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.post(self._list_url(), {"code": "fr", "name": "French v2"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("code", r.json())

    def test_create_invalid_code_returns_400(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.post(self._list_url(), {"code": "x"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("code", r.json())

    # -------------------------
    # update
    # -------------------------
    def test_patch_activate_sweeps(self):
        Category.objects.create(name="Grains")
        self.client.force_authenticate(user=self.admin)

        with mock.patch("translation.orchestrator.translate", return_value="Granos"):
            with self.captureOnCommitCallbacks(execute=True):
                r = self.client.patch(self._detail_url(self.lang_es), {"active": True}, format="json")

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertTrue(r.json()["active"])
        self.assertEqual(Translation.objects.get(language=self.lang_es).translated_text, "Granos")

    def test_patch_deactivate_keeps_translations(self):
        grains = Category.objects.create(name="Grains")
        Translation.objects.create(category=grains, language=self.lang_fr, translated_text="Céréales",
                                   is_automatic=True)
        self.client.force_authenticate(user=self.admin)

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            r = self.client.patch(self._detail_url(self.lang_fr), {"active": False}, format="json")

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(r.json()["active"])
        self.assertEqual(callbacks, [])
        self.assertTrue(Translation.objects.filter(language=self.lang_fr).exists())

    def test_patch_deactivate_default_language_is_400(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.patch(self._detail_url(self.lang_en), {"active": False}, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.json(), {"active": ["The default language cannot be deactivated."]})
        self.lang_en.refresh_from_db()
        self.assertTrue(self.lang_en.active)

    def test_put_updates_name(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.put(self._detail_url(self.lang_fr),
                            {"code": "FR", "name": "Français", "active": True}, format="json")

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()["code"], "fr")
        self.assertEqual(r.json()["name"], "Français")

    # -------------------------
    # bulk update
    # -------------------------
    def test_bulk_update(self):
        Category.objects.create(name="Grains")
        self.client.force_authenticate(user=self.admin)
        payload = {"languages": [{"code": "es", "active": True}, {"code": "fr", "active": False}]}

        with mock.patch("translation.orchestrator.translate", return_value="Granos") as tr:
            with self.captureOnCommitCallbacks(execute=True):
                r = self.client.post(reverse("api:lang-api:lang-bulk-update"), payload, format="json")

        self.assertEqual(r.status_code, status.HTTP_200_OK, r.content)
        self.assertEqual(sorted(it["code"] for it in r.json()["changed"]), ["es", "fr"])
        # seule la langue nouvellement active est balayée
        tr.assert_called_once_with("Grains", "es", "category")

    def test_bulk_update_unknown_code_changes_nothing(self):
        self.client.force_authenticate(user=self.admin)
        payload = {"languages": [{"code": "es", "active": True}, {"code": "xx", "active": True}]}

        r = self.client.post(reverse("api:lang-api:lang-bulk-update"), payload, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("languages", r.json())
        self.lang_es.refresh_from_db()
        self.assertFalse(self.lang_es.active)

    def test_bulk_update_default_language_is_400(self):
        self.client.force_authenticate(user=self.admin)
        payload = {"languages": [{"code": "es", "active": True}, {"code": "en", "active": False}]}

        r = self.client.post(reverse("api:lang-api:lang-bulk-update"), payload, format="json")

        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.lang_es.refresh_from_db()
        self.assertFalse(self.lang_es.active)

    # -------------------------
    # destroy
    # -------------------------
    def test_admin_can_delete_language(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.delete(self._detail_url(self.lang_es))
        self.assertEqual(r.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Language.objects.filter(id=self.lang_es.id).exists())

    def test_default_language_cannot_be_deleted(self):
        self.client.force_authenticate(user=self.admin)
        r = self.client.delete(self._detail_url(self.lang_en))
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Language.objects.filter(id=self.lang_en.id).exists())
