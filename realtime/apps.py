"""
Django app configuration for the realtime chat app.
Owns the per-process chat hub.
"""

import logging

from django.apps import AppConfig

from .hub import ChatHub

logger = logging.getLogger(__name__)


class RealtimeConfig(AppConfig):
    """App configuration for realtime chat."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"

    def ready(self):
        self.hub = ChatHub()
        logger.debug("Chat hub created for realtime app")
