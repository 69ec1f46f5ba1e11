from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'play_sessions'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.SessionViewSet, basename='session')

urlpatterns = [
    # Session ViewSet routes
    # GET    /api/sessions/                        - List sessions (?status=)
    # POST   /api/sessions/                        - Open session for a date
    # GET    /api/sessions/{id}/                   - Session with votes

    # Custom session actions
    # POST   /api/sessions/{id}/counts/            - Update counts (admin)
    # POST   /api/sessions/{id}/complete/          - Close session (admin)
    # POST   /api/sessions/{id}/deactivate/        - Call off session (admin)
    # POST   /api/sessions/{id}/vote/              - Cast own vote
    # DELETE /api/sessions/{id}/vote/              - Retract own vote
    # POST   /api/sessions/{id}/proxy_votes/       - Vote for someone
    # DELETE /api/sessions/{id}/proxy_votes/       - Withdraw a proxy vote
    # POST   /api/sessions/{id}/bulk_proxy_votes/  - Add anonymous guests
    # GET    /api/sessions/{id}/my_proxy_votes/    - Own proxy votes
    # GET    /api/sessions/statistics/             - Totals over a date range

    path('', include(router.urls)),
]
