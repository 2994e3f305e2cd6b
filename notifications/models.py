from django.db import models

from utils.enums import DeliveryStatusChoices, WorkOrderEventTypeChoices


class WorkOrderEvent(models.Model):
    """
    Lifecycle event emitted for a work order (submitted, completed, cancelled)
    """
    event_type = models.CharField(max_length=20, choices=WorkOrderEventTypeChoices.choices)
    work_order = models.ForeignKey('work_orders.WorkOrder', on_delete=models.CASCADE, related_name='events')
    payload = models.JSONField(default=dict)
    delivery_status = models.CharField(
        max_length=20,
        choices=DeliveryStatusChoices.choices,
        default=DeliveryStatusChoices.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Work Order Event'
        verbose_name_plural = 'Work Order Events'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['event_type', 'delivery_status'], name='event_type_delivery_idx'),
            models.Index(fields=['created_at'], name='event_created_idx'),
        ]

    def __str__(self):
        return f"{self.get_event_type_display()} - work order {self.work_order_id}"
