"""
Lumora core services.

Services own DB access and transactions and return model instances;
views own request parsing and response shaping.
"""

from .brands_service import (
    create_brand,
    delete_brand,
    get_brand,
    get_brand_with_topics,
    list_brands,
    list_topics,
    update_brand,
)
from .cameos_service import create_cameo, delete_cameo, list_cameos, update_cameo
from .content_service import (
    UNSET,
    content_items_by_status,
    create_content_item,
    get_content_item,
    list_content_items,
    list_generations,
    update_content_details,
    update_content_status,
)
from .focus_sessions_service import list_focus_sessions, log_focus_session

__all__ = [
    "create_brand",
    "list_brands",
    "get_brand",
    "get_brand_with_topics",
    "update_brand",
    "delete_brand",
    "list_topics",
    "UNSET",
    "list_content_items",
    "content_items_by_status",
    "create_content_item",
    "get_content_item",
    "update_content_status",
    "update_content_details",
    "list_generations",
    "list_cameos",
    "create_cameo",
    "update_cameo",
    "delete_cameo",
    "log_focus_session",
    "list_focus_sessions",
]
