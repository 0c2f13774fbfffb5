from django.urls import path
from . import views

urlpatterns = [
    path('parse-job-url', views.parse_job_url, name='parse-job-url'),
    path('parse-job-file', views.parse_job_file, name='parse-job-file'),
    path('fetch-company-facts', views.fetch_company_facts, name='fetch-company-facts'),
]
