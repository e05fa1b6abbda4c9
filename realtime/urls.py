from django.urls import path

from .views import chat_presence

urlpatterns = [
    path("presence/", chat_presence, name="chat-presence"),
]
