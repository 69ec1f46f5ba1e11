from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # Payment ViewSet routes
    # GET    /api/payments/                    - List payments (?session=, ?paid=)
    # GET    /api/payments/{id}/               - Payment detail
    # POST   /api/payments/{id}/mark_paid/     - Mark as paid (admin)
    # GET    /api/payments/my_summary/         - Own totals (?since=)
    # GET    /api/payments/summary/{session}/  - Session collection progress (admin)

    # Settlement
    path('settle/<uuid:session_id>/', views.settle, name='settle'),
    path('summary/<uuid:session_id>/', views.session_summary, name='session-summary'),

    # Include router URLs
    path('', include(router.urls)),
]
