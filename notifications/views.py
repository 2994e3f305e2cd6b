from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from .models import WorkOrderEvent
from .serializers import WorkOrderEventSerializer


class WorkOrderEventViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Events published for work orders, newest first
    """
    permission_classes = [IsAuthenticated]
    serializer_class = WorkOrderEventSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['event_type', 'delivery_status', 'work_order']

    def get_queryset(self):
        return WorkOrderEvent.objects.select_related('work_order')
