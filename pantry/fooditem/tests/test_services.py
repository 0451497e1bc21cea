from unittest import mock

from category.models import Category
from core.exceptions import ItemLimitError, NameValidationError
from core.models import PantrySettings
from django.test import TestCase, override_settings
from language.models import Language
from translation.models import Translation

from fooditem.models import FoodItem
from fooditem.services import create_food_item, delete_food_item, update_food_item


@override_settings(PANTRY_DEFAULT_LANGUAGE="en", TRANSLATION_REQUEST_DELAY=0, TRANSLATION_TASKS_INLINE=True)
class FoodItemServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        Language.objects.create(code="en", name="English", active=True)
        Language.objects.create(code="es", name="Spanish", active=True)
        Language.objects.create(code="fr", name="French", active=True)
        cls.grains = Category.objects.create(name="Grains")

    def test_create_with_custom_fields_and_translations(self):
        with mock.patch("translation.orchestrator.translate", side_effect=lambda t, lang, ctx: f"{lang}:{t}") as tr:
            with self.captureOnCommitCallbacks(execute=True):
                item = create_food_item(
                    name="brown rice",
                    category=self.grains,
                    item_limit=3,
                    vegan=True,
                    custom_fields=[{"key": "brand", "value": "Acme"}],
                )

        self.assertEqual(item.name, "Brown Rice")
        self.assertEqual(item.item_limit, 3)
        self.assertTrue(item.vegan)
        self.assertEqual(list(item.custom_fields.values_list("key", "value")), [("brand", "Acme")])

        tr.assert_any_call("Brown Rice", "es", "foodItem")
        self.assertEqual(
            sorted(Translation.objects.filter(food_item=item).values_list("translated_text", flat=True)),
            ["es:Brown Rice", "fr:Brown Rice"],
        )

    def test_item_limit_bounded_by_global_limit(self):
        s = PantrySettings.load()
        s.global_upper_limit = 5
        s.save()

        with self.assertRaises(ItemLimitError) as ctx:
            create_food_item(name="Pasta", category=self.grains, item_limit=6)
        self.assertEqual(ctx.exception.message, "Item limit cannot exceed global limit of 5")
        self.assertFalse(FoodItem.objects.exists())

    def test_negative_item_limit(self):
        with self.assertRaises(ItemLimitError):
            create_food_item(name="Pasta", category=self.grains, item_limit=-1)

    def test_name_clash_with_category(self):
        with self.assertRaises(NameValidationError) as ctx:
            create_food_item(name="grains", category=self.grains)
        self.assertEqual(ctx.exception.message, "This name already exists as a category.")

    def test_update_without_rename_does_not_translate(self):
        item = FoodItem.objects.create(name="Pasta", category=self.grains)

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            update_food_item(item, name="PASTA", in_stock=False, item_limit=2)

        item.refresh_from_db()
        self.assertEqual(callbacks, [])
        self.assertFalse(item.in_stock)
        self.assertEqual(item.item_limit, 2)

    def test_update_rename_schedules_translation(self):
        item = FoodItem.objects.create(name="Pasta", category=self.grains)

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            update_food_item(item, name="penne pasta")

        self.assertEqual(item.name, "Penne Pasta")
        self.assertEqual(len(callbacks), 1)

    def test_update_replaces_custom_fields(self):
        item = FoodItem.objects.create(name="Pasta", category=self.grains)
        item.custom_fields.create(key="brand", value="Old")

        update_food_item(item, custom_fields=[{"key": "size", "value": "500g"}])

        self.assertEqual(list(item.custom_fields.values_list("key", "value")), [("size", "500g")])

    def test_update_without_custom_fields_keeps_them(self):
        item = FoodItem.objects.create(name="Pasta", category=self.grains)
        item.custom_fields.create(key="brand", value="Acme")

        update_food_item(item, must_go=True)

        self.assertEqual(item.custom_fields.count(), 1)

    def test_delete_cascades(self):
        item = FoodItem.objects.create(name="Pasta", category=self.grains)
        item.custom_fields.create(key="brand", value="Acme")
        Translation.objects.create(food_item=item, language=Language.objects.get(code="es"),
                                   translated_text="Pasta", is_automatic=True)

        delete_food_item(item)

        self.assertFalse(FoodItem.objects.exists())
        self.assertFalse(Translation.objects.exists())
