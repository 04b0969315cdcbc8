"""
URL configuration for the AutoLoc car rental application.
"""
from django.contrib import admin
from django.conf import settings
from django.conf.urls.static import static
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('', include('apps.pages.urls', namespace='pages')),
    path('accounts/', include('apps.accounts.urls', namespace='accounts')),
    path('vehicles/', include('apps.vehicles.urls', namespace='vehicles')),
    path('reservations/', include('apps.reservations.urls', namespace='reservations')),
    path('reviews/', include('apps.reviews.urls', namespace='reviews')),
    path('client/', include('apps.clients.urls', namespace='clients')),
    path('dashboard/', include('apps.dashboard.urls', namespace='dashboard')),
]

# Custom Error Handlers
handler404 = 'apps.pages.views.error_404'
handler500 = 'apps.pages.views.error_500'
handler403 = 'apps.pages.views.error_403'

if settings.DEBUG:
    if 'debug_toolbar' in settings.INSTALLED_APPS:
        import debug_toolbar
        urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
