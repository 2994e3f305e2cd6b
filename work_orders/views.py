import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from integrations import get_clients

from .completion_service import CompletionService
from .models import WorkOrder, WorkPlan
from .plan_service import UpdatePlanService
from .serializers import (
    DispatchOrderSerializer, SelectProductSerializer, SelectProjectSerializer,
    SelectSetSerializer, UpdateOrderModulesSerializer, WorkOrderSerializer,
    WorkPlanCreateSerializer, WorkPlanDetailSerializer, WorkPlanListSerializer
)

logger = logging.getLogger(__name__)


class WorkPlanViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """
    Work plans with one action per configuration or lifecycle request.
    A rejected request answers 400 with the reason in ``error``.
    """
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['owner_email', 'project_id', 'product']
    ordering_fields = ['created_at', 'desired_date']

    def get_queryset(self):
        return WorkPlan.objects.select_related('product')

    def get_serializer_class(self):
        if self.action == 'list':
            return WorkPlanListSerializer
        if self.action == 'create':
            return WorkPlanCreateSerializer
        return WorkPlanDetailSerializer

    def perform_plan_request(self, request, serializer_class):
        plan = self.get_object()
        serializer = serializer_class(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        service = UpdatePlanService(plan, get_clients())
        if not service.perform(serializer.to_request()):
            return Response({'success': False, 'error': service.error}, status=status.HTTP_400_BAD_REQUEST)

        plan.refresh_from_db()
        return Response({'success': True, 'data': WorkPlanDetailSerializer(plan).data})

    @action(detail=True, methods=['post'], url_path='select-project')
    def select_project(self, request, pk=None):
        """Choose the project whose cost code pays for the plan"""
        return self.perform_plan_request(request, SelectProjectSerializer)

    @action(detail=True, methods=['post'], url_path='select-set')
    def select_set(self, request, pk=None):
        return self.perform_plan_request(request, SelectSetSerializer)

    @action(detail=True, methods=['post'], url_path='select-product')
    def select_product(self, request, pk=None):
        """Choose the product and one module path per process; recreates the orders"""
        return self.perform_plan_request(request, SelectProductSerializer)

    @action(detail=True, methods=['post'], url_path='update-modules')
    def update_modules(self, request, pk=None):
        return self.perform_plan_request(request, UpdateOrderModulesSerializer)

    @action(detail=True, methods=['post'], url_path='dispatch')
    def dispatch_order(self, request, pk=None):
        """Send the next order of the plan to be processed"""
        return self.perform_plan_request(request, DispatchOrderSerializer)


class WorkOrderViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = WorkOrderSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'work_plan', 'process']
    ordering_fields = ['dispatch_date', 'completion_date', 'created_at']

    def get_queryset(self):
        return WorkOrder.objects.select_related('process', 'work_plan').prefetch_related(
            'module_choices__process_module'
        )


def _finish(request, operation):
    msg = request.data if isinstance(request.data, dict) else {}
    service = CompletionService(get_clients())
    result = getattr(service, operation)(msg)
    if not result.success:
        return Response(result.errors, status=result.errors.get('status', status.HTTP_422_UNPROCESSABLE_ENTITY))
    return Response({'success': True, 'message': f'Work order {operation} message processed'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def complete_work_order(request):
    """
    Receive the completion message of an active work order
    """
    return _finish(request, 'complete')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cancel_work_order(request):
    """
    Receive the cancellation message of an active work order
    """
    return _finish(request, 'cancel')
