from django.urls import path
from . import views

urlpatterns = [
    path('track-view', views.track_view, name='track-view'),
    path('track-click', views.track_click, name='track-click'),
]
