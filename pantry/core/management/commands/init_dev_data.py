from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from category.models import Category
from category.services import create_category
from fooditem.models import FoodItem
from fooditem.services import create_food_item
from language.models import Language
from language.services import ensure_seeded, set_language_active
from translation.tasks import shutdown_background_executor

User = get_user_model()


class Command(BaseCommand):
    help = "Initialize dev data: admin user, languages, categories, food items (idempotent)."

    ACTIVE_LANGUAGES = ["es", "fr"]

    CATALOG = {
        "Canned Goods": [
            {"name": "Canned Beans", "item_limit": 2, "vegetarian": True, "vegan": True},
            {"name": "Canned Tuna", "item_limit": 2},
        ],
        "Grains": [
            {"name": "Brown Rice", "gluten_free": True, "vegan": True},
            {"name": "Pasta", "item_limit": 3, "vegetarian": True},
        ],
        "Fresh Produce": [
            {"name": "Apples", "must_go": True, "vegan": True, "ready_to_eat": True},
        ],
    }

    def add_arguments(self, parser):
        parser.add_argument(
            "--no-translate",
            action="store_true",
            help="Create the data without activating extra languages (no translator calls).",
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            self._ensure_admin_user(username="admin", email="admin@example.com")

            self._init_languages(activate=not options["no_translate"])
            self._init_catalog()

        # sans broker, les traductions tournent en arrière-plan : on attend leur fin
        shutdown_background_executor(wait=True)
        self.stdout.write(self.style.SUCCESS("✅ Dev data initialized"))

    # ---------- USERS ----------
    def _ensure_admin_user(self, *, username: str, email: str):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "is_staff": True, "is_superuser": True},
        )
        if created:
            # mot de passe simple en dev
            user.set_password("SuperPassword123")
            user.save(update_fields=["password"])
            self.stdout.write(self.style.SUCCESS(f"✔ user '{username}' created"))
        else:
            self.stdout.write(f"✔ user '{username}' exists")
        return user

    # ---------- LANGUAGES ----------
    def _init_languages(self, *, activate: bool) -> None:
        created = ensure_seeded()
        self.stdout.write(f"✔ languages → {len(created)} created")

        if not activate:
            return
        for lang in Language.objects.filter(code__in=self.ACTIVE_LANGUAGES):
            if set_language_active(lang, True):
                self.stdout.write(f"✔ language {lang.code} → activated")

    # ---------- CATALOG ----------
    def _init_catalog(self) -> None:
        for category_name, items in self.CATALOG.items():
            category = Category.objects.filter(name__iexact=category_name).first()
            if category is None:
                category = create_category(name=category_name)
                self.stdout.write(f"✔ category {category.name} → created")
            else:
                self.stdout.write(f"✔ category {category.name} → exists")

            for item in items:
                attrs = dict(item)
                name = attrs.pop("name")
                if FoodItem.objects.filter(name__iexact=name).exists():
                    self.stdout.write(f"  ✔ food item {name} → exists")
                    continue
                food_item = create_food_item(name=name, category=category, **attrs)
                self.stdout.write(f"  ✔ food item {food_item.name} → created")
