from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import WorkPlanViewSet, WorkOrderViewSet, complete_work_order, cancel_work_order

router = DefaultRouter()
router.register(r'work-plans', WorkPlanViewSet, basename='workplan')
router.register(r'work-orders', WorkOrderViewSet, basename='workorder')

app_name = 'work_orders'

urlpatterns = [
    path('work-orders/complete/', complete_work_order, name='complete_work_order'),
    path('work-orders/cancel/', cancel_work_order, name='cancel_work_order'),
    path('', include(router.urls)),
]

# Available API endpoints:
"""
Work plans:
- GET    /api/work-plans/                        - List work plans
- POST   /api/work-plans/                        - Create a work plan
- GET    /api/work-plans/{id}/                   - Work plan with its orders
- POST   /api/work-plans/{id}/select-set/        - Choose the input set
- POST   /api/work-plans/{id}/select-project/    - Choose the project
- POST   /api/work-plans/{id}/select-product/    - Choose product and module paths
- POST   /api/work-plans/{id}/update-modules/    - Change the modules of a queued order
- POST   /api/work-plans/{id}/dispatch/          - Dispatch the next order

Work orders:
- GET    /api/work-orders/                       - List work orders
- GET    /api/work-orders/{id}/                  - Work order detail
- POST   /api/work-orders/complete/              - Completion message
- POST   /api/work-orders/cancel/                - Cancellation message
"""
