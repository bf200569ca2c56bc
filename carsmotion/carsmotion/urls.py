from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Operator back office (Django admin)
    path("admin/", admin.site.urls),
    # JSON endpoints for the reservation / ledger workflows
    path("api/", include("fleet_core.urls")),
]
