from django.core.management.base import BaseCommand

from language.services import ensure_seeded, get_default_language_code


class Command(BaseCommand):
    help = "Seed the supported languages (idempotent): default language active, others inactive."

    def handle(self, *args, **options):
        created = ensure_seeded()
        for lang in created:
            self.stdout.write(f"✔ language {lang.code} → created ({'active' if lang.active else 'inactive'})")
        self.stdout.write(self.style.SUCCESS(
            f"✅ {len(created)} language(s) created, default language = {get_default_language_code()}"
        ))
