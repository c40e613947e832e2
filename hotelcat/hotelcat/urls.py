from django.conf import settings
from django.contrib import admin
from django.urls import include, path, re_path
from django.views.static import serve

from .views import health

urlpatterns = [
    path('health', health, name='health'),
    path('django-admin/', admin.site.urls),
    path('api/auth/', include('users.urls')),
    path('api/', include('hotels.urls')),
    path('api/', include('catalog.urls')),
    # Uploaded images are part of the public catalog, served in every environment
    re_path(
        r'^%s(?P<path>.*)$' % settings.MEDIA_URL.lstrip('/'),
        serve, {'document_root': settings.MEDIA_ROOT},
    ),
]
