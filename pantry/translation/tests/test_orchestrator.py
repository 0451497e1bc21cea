from unittest import mock

from category.models import Category
from core.models import EntityType
from django.test import TestCase, override_settings
from fooditem.models import FoodItem
from language.models import Language

from translation.exceptions import EntityNotFound, TranslationFailed
from translation.models import Translation
from translation.orchestrator import (
    TranslationOutcome,
    generate_automatic_translations,
    generate_translations_for_language,
)


def fake_translator(text, target_language, context):
    return f"{text} ({target_language})"


@override_settings(PANTRY_DEFAULT_LANGUAGE="en", TRANSLATION_REQUEST_DELAY=0, TRANSLATION_PRESERVE_MANUAL=True)
class GenerateAutomaticTranslationsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.en = Language.objects.create(code="en", name="English", active=True)
        cls.es = Language.objects.create(code="es", name="Spanish", active=True)
        cls.fr = Language.objects.create(code="fr", name="French", active=True)
        cls.de = Language.objects.create(code="de", name="German", active=False)
        cls.grains = Category.objects.create(name="Grains")

    def test_one_automatic_row_per_active_non_default_language(self):
        outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)

        self.assertEqual([o.language_code for o in outcomes], ["es", "fr"])
        self.assertTrue(all(o.status == TranslationOutcome.SUCCESS for o in outcomes))

        rows = Translation.objects.filter(category=self.grains).order_by("language__code")
        self.assertEqual(
            [(t.language.code, t.translated_text, t.is_automatic) for t in rows],
            [("es", "Grains (es)", True), ("fr", "Grains (fr)", True)],
        )

    def test_failure_is_isolated_per_language(self):
        def translator(text, target_language, context):
            if target_language == "fr":
                raise TranslationFailed("quota exceeded")
            return "Granos"

        with self.assertLogs("translation.orchestrator", level="WARNING") as logs:
            outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=translator)

        by_lang = {o.language_code: o for o in outcomes}
        self.assertEqual(by_lang["es"].status, TranslationOutcome.SUCCESS)
        self.assertEqual(by_lang["fr"].status, TranslationOutcome.FAILURE)
        self.assertEqual(by_lang["fr"].error, "quota exceeded")
        self.assertFalse(by_lang["fr"].ok)

        self.assertEqual(list(Translation.objects.values_list("language__code", flat=True)), ["es"])
        self.assertIn("language=fr", logs.output[0])
        self.assertIn("quota exceeded", logs.output[0])

    def test_over_long_translation_is_recorded_as_failure(self):
        def translator(text, target_language, context):
            return "x" * 300 if target_language == "es" else "Céréales"

        with self.assertLogs("translation.orchestrator", level="WARNING"):
            outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=translator)

        by_lang = {o.language_code: o for o in outcomes}
        self.assertEqual(by_lang["es"].status, TranslationOutcome.FAILURE)
        self.assertIn("too long", by_lang["es"].error)
        self.assertEqual(by_lang["fr"].status, TranslationOutcome.SUCCESS)
        self.assertFalse(Translation.objects.filter(category=self.grains, language=self.es).exists())

    def test_unexpected_error_is_isolated_too(self):
        def translator(text, target_language, context):
            if target_language == "es":
                raise RuntimeError("boom")
            return "Céréales"

        outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=translator)

        self.assertEqual([o.status for o in outcomes], [TranslationOutcome.FAILURE, TranslationOutcome.SUCCESS])

    def test_empty_translation_is_a_failure(self):
        outcomes = generate_automatic_translations(
            EntityType.CATEGORY, self.grains.pk, translator=lambda t, lang, ctx: "   ",
        )
        self.assertTrue(all(o.status == TranslationOutcome.FAILURE for o in outcomes))
        self.assertFalse(Translation.objects.exists())

    def test_rerun_upserts_instead_of_duplicating(self):
        generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)

        self.grains.name = "Cereals"
        self.grains.save()
        generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)

        rows = Translation.objects.filter(category=self.grains).order_by("language__code")
        self.assertEqual([t.translated_text for t in rows], ["Cereals (es)", "Cereals (fr)"])

    def test_manual_translation_is_preserved(self):
        Translation.objects.create(category=self.grains, language=self.fr, translated_text="Céréales",
                                   is_automatic=False)
        translator = mock.Mock(side_effect=fake_translator)

        outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=translator)

        translator.assert_called_once_with("Grains", "es", EntityType.CATEGORY)
        self.assertEqual(outcomes[1].status, TranslationOutcome.SKIPPED)
        self.assertEqual(Translation.objects.get(language=self.fr).translated_text, "Céréales")

    @override_settings(TRANSLATION_PRESERVE_MANUAL=False)
    def test_manual_translation_overwritten_when_not_preserved(self):
        Translation.objects.create(category=self.grains, language=self.fr, translated_text="Céréales",
                                   is_automatic=False)

        generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)

        fr = Translation.objects.get(language=self.fr)
        self.assertEqual(fr.translated_text, "Grains (fr)")
        self.assertTrue(fr.is_automatic)

    def test_food_item_context(self):
        item = FoodItem.objects.create(name="Brown Rice", category=self.grains)
        translator = mock.Mock(return_value="Arroz integral")

        generate_automatic_translations(EntityType.FOOD_ITEM, item.pk, translator=translator)

        translator.assert_any_call("Brown Rice", "es", EntityType.FOOD_ITEM)
        self.assertEqual(Translation.objects.filter(food_item=item).count(), 2)

    def test_missing_entity_raises(self):
        with self.assertRaises(EntityNotFound):
            generate_automatic_translations(EntityType.CATEGORY, 999999, translator=fake_translator)

    def test_no_target_language(self):
        Language.objects.exclude(code="en").update(active=False)
        translator = mock.Mock()

        self.assertEqual(generate_automatic_translations(EntityType.CATEGORY, self.grains.pk,
                                                         translator=translator), [])
        translator.assert_not_called()

    @override_settings(TRANSLATION_REQUEST_DELAY=0.5)
    def test_fixed_delay_between_calls(self):
        with mock.patch("translation.orchestrator.time.sleep") as sleep:
            generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)

        # 2 langues -> 1 pause entre les deux appels
        sleep.assert_called_once_with(0.5)

    def test_default_translator_is_module_translate(self):
        with mock.patch("translation.orchestrator.translate", side_effect=fake_translator) as tr:
            generate_automatic_translations(EntityType.CATEGORY, self.grains.pk)
        self.assertEqual(tr.call_count, 2)

    def test_outcome_as_dict(self):
        outcomes = generate_automatic_translations(EntityType.CATEGORY, self.grains.pk, translator=fake_translator)
        d = outcomes[0].as_dict()
        self.assertEqual(d["entity_type"], "category")
        self.assertEqual(d["entity_id"], self.grains.pk)
        self.assertEqual(d["language_code"], "es")
        self.assertEqual(d["status"], "success")
        self.assertIsNone(d["error"])


@override_settings(PANTRY_DEFAULT_LANGUAGE="en", TRANSLATION_REQUEST_DELAY=0)
class LanguageSweepTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.en = Language.objects.create(code="en", name="English", active=True)
        cls.es = Language.objects.create(code="es", name="Spanish", active=True)
        cls.fr = Language.objects.create(code="fr", name="French", active=False)
        cls.grains = Category.objects.create(name="Grains")
        cls.dairy = Category.objects.create(name="Dairy")
        cls.rice = FoodItem.objects.create(name="Brown Rice", category=cls.grains)

    def test_sweep_covers_every_category_then_food_item(self):
        translator = mock.Mock(side_effect=fake_translator)

        outcomes = generate_translations_for_language(self.es.pk, translator=translator)

        self.assertEqual(
            [(o.entity_type, o.entity_id) for o in outcomes],
            [
                (EntityType.CATEGORY, self.grains.pk),
                (EntityType.CATEGORY, self.dairy.pk),
                (EntityType.FOOD_ITEM, self.rice.pk),
            ],
        )
        self.assertEqual(Translation.objects.filter(language=self.es).count(), 3)

    def test_sweep_failure_does_not_stop_other_entities(self):
        def translator(text, target_language, context):
            if text == "Grains":
                raise TranslationFailed("nope")
            return text.upper()

        outcomes = generate_translations_for_language(self.es.pk, translator=translator)

        self.assertEqual([o.status for o in outcomes], ["failure", "success", "success"])
        self.assertEqual(Translation.objects.count(), 2)

    def test_sweep_noop_for_inactive_default_or_missing_language(self):
        translator = mock.Mock()
        self.assertEqual(generate_translations_for_language(self.fr.pk, translator=translator), [])
        self.assertEqual(generate_translations_for_language(self.en.pk, translator=translator), [])
        self.assertEqual(generate_translations_for_language(999999, translator=translator), [])
        translator.assert_not_called()
