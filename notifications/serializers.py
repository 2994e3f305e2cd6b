from rest_framework import serializers

from .models import WorkOrderEvent


class WorkOrderEventSerializer(serializers.ModelSerializer):
    """Serializer for WorkOrderEvent model"""
    event_type_display = serializers.CharField(source='get_event_type_display', read_only=True)

    class Meta:
        model = WorkOrderEvent
        fields = [
            'id', 'event_type', 'event_type_display', 'work_order',
            'payload', 'delivery_status', 'created_at'
        ]
        read_only_fields = fields
