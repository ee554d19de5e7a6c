"""
Management command to (re)ingest brand profiles into brand_vectors.

Usage:
    python manage.py ingest_brand_vectors
    python manage.py ingest_brand_vectors --brand-id <uuid> --brand-id <uuid>
"""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandError

from lumora.brandbrain.ingestion import ingest_brand_profile
from lumora.core.models import Brand

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Embed brand profiles and topic decks into brand_vectors"

    def add_arguments(self, parser):
        parser.add_argument(
            "--brand-id",
            action="append",
            dest="brand_ids",
            default=[],
            help="Only ingest this brand (repeatable)",
        )

    def handle(self, *args, **options):
        brands = Brand.objects.prefetch_related("topics").order_by("name")
        if options["brand_ids"]:
            brands = brands.filter(id__in=options["brand_ids"])
            if not brands.exists():
                raise CommandError("No matching brands found")

        ingested = 0
        failed = 0
        entries = 0
        for brand in brands:
            try:
                count = ingest_brand_profile(brand, brand.topics.all())
            except Exception as exc:
                failed += 1
                logger.exception("Ingest failed for brand %s", brand.id)
                self.stdout.write(self.style.ERROR(f"  {brand.name}: failed ({exc})"))
                continue
            ingested += 1
            entries += count
            self.stdout.write(f"  {brand.name}: {count} entries")

        self.stdout.write(
            self.style.SUCCESS(
                f"Ingested {ingested} brands ({entries} entries), {failed} failed"
            )
        )
