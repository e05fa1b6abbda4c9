"""
WSGI config for civic_chat project.

Only HTTP (admin, health, presence) is served over WSGI; the chat socket needs ASGI.
"""
import civic_chat.env_bootstrap  # noqa: F401

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "civic_chat.settings")

application = get_wsgi_application()
