from django.contrib import admin
from django.urls import include, path

from tracker import views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', views.health, name='health'),
    path('api/', include('tracker.urls')),
]
