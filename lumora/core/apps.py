"""
Django app configuration for Lumora core.

Owns the relational schema: brands, topics, content items, generations,
cameos and focus sessions.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lumora.core"
    verbose_name = "Lumora Core"
