from django.contrib import admin
from django.urls import include, path

from .health import health

urlpatterns = [
    path("admin/", admin.site.urls),
    # Load balancer health check
    path("health/", health),
    path("api/chat/", include("realtime.urls")),
]
