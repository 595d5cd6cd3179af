from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("parking.urls")),
]

# Custom error handlers (used when DEBUG = False)
handler404 = "parking.views.custom_404"
handler500 = "parking.views.custom_500"
