"""
Django app configuration for the brand brain.

Ingestion into brand_vectors, similarity retrieval, context building and
the brand chat assistant.
"""

from django.apps import AppConfig


class BrandBrainConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lumora.brandbrain"
    label = "brandbrain"
    verbose_name = "Lumora Brand Brain"
