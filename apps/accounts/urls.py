from django.urls import path
from . import views

urlpatterns = [
    path('reset-password', views.reset_password, name='reset-password'),
    path('verify-linkedin', views.verify_linkedin, name='verify-linkedin'),
]
