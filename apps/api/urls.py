"""
URL routing for API endpoints.
"""
from django.urls import path
from .views import StatusView, CredentialView

app_name = 'api'

urlpatterns = [
    path('status/', StatusView.as_view(), name='status'),
    path('credential/', CredentialView.as_view(), name='credential'),
]
