from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import WorkOrderEventViewSet

router = DefaultRouter()
router.register(r'work-order-events', WorkOrderEventViewSet, basename='workorderevent')

app_name = 'notifications'

urlpatterns = [
    path('', include(router.urls)),
]

# Available API endpoints:
"""
- GET    /api/notifications/work-order-events/          - List events
- GET    /api/notifications/work-order-events/{id}/     - Get one event

Query Parameters:
- event_type: submitted, completed, cancelled
- delivery_status: pending, sent, failed
- work_order: work order id
"""
