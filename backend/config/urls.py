"""
URL configuration for the FOGO backend.

Every app is mounted under api/v1/; see each app's urls.py for its endpoints.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "FOGO Administración"
admin.site.site_title = "FOGO Admin"
admin.site.index_title = "Recetas, lotes, compras y proveedores"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.parties.urls')),
    path('api/v1/', include('backend.purchasing.urls')),
    path('api/v1/', include('backend.production.urls')),
]
