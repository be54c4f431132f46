from django.urls import path
from . import views

urlpatterns = [
    path('student/add', views.add_student, name='add_student'),
    path('student/all', views.list_students, name='list_students'),
    path('student/details/<str:student_id>', views.student_details, name='student_details'),
    path('student/edit', views.edit_student, name='edit_student'),
    path('student/delete/<str:student_id>', views.remove_student, name='remove_student'),
    path('settings/', views.sync_settings, name='sync_settings'),
    path('settings/sync', views.trigger_sync, name='trigger_sync'),
]
