from django.apps import apps
from django.urls import re_path

from .consumers import ChatConsumer


def get_websocket_urlpatterns():
    hub = apps.get_app_config("realtime").hub
    return [
        # Community chat room; leading slash is stripped by URLRouter.
        re_path(r"^ws/?$", ChatConsumer.as_asgi(hub=hub)),
    ]
