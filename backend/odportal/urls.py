from django.urls import path, include
from django.contrib import admin
from django.conf import settings
from django.conf.urls.static import static
from django.views.generic import RedirectView
from django.http import HttpResponse

import odportal.admin_customization  # noqa: F401
from odportal import admin_views

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False), name='db-dashboard'),
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/dashboard-data/', admin_views.admin_counts, name='admin-dashboard-data'),
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/requests/', include('od_requests.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
