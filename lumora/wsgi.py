"""
WSGI config for the Lumora backend.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "lumora.settings")

application = get_wsgi_application()
