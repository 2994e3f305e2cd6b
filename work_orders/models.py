import uuid

from django.db import models

from catalogue.models import Process, ProcessModule, Product
from utils.enums import WorkOrderStatusChoices, WorkPlanStatusChoices

from . import state_machine


class WorkPlan(models.Model):
    """
    Request for outsourced processing of a material set through a product.
    The status is derived from the plan's work orders and never stored.
    """
    owner_email = models.EmailField()
    project_id = models.IntegerField(null=True, blank=True, help_text="Project in the project directory")
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='work_plans'
    )
    original_set_uuid = models.CharField(max_length=64, null=True, blank=True)
    comment = models.TextField(blank=True, null=True)
    desired_date = models.DateField(null=True, blank=True)
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Work plan {self.id} ({self.owner_email})"

    @property
    def status(self):
        return state_machine.plan_status(self.work_orders.values_list('status', flat=True))

    @property
    def is_in_construction(self):
        return self.status == WorkPlanStatusChoices.IN_CONSTRUCTION

    @property
    def is_active(self):
        return self.status == WorkPlanStatusChoices.ACTIVE

    @property
    def is_closed(self):
        return self.status == WorkPlanStatusChoices.CLOSED

    @property
    def is_cancelled(self):
        return self.status == WorkPlanStatusChoices.CANCELLED

    def ordered_orders(self):
        return self.work_orders.order_by('order_index')


class WorkOrder(models.Model):
    work_plan = models.ForeignKey(WorkPlan, on_delete=models.CASCADE, related_name='work_orders')
    process = models.ForeignKey(Process, on_delete=models.PROTECT, related_name='work_orders')
    order_index = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=WorkOrderStatusChoices.choices,
        default=WorkOrderStatusChoices.QUEUED
    )
    original_set_uuid = models.CharField(max_length=64, null=True, blank=True)
    set_uuid = models.CharField(max_length=64, null=True, blank=True, help_text="Locked set handed to the process")
    finished_set_uuid = models.CharField(max_length=64, null=True, blank=True)
    dispatch_date = models.DateTimeField(null=True, blank=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    comment = models.TextField(blank=True, null=True)
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    work_order_uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['work_plan', 'order_index']
        unique_together = [['work_plan', 'order_index']]
        indexes = [
            models.Index(fields=['status'], name='work_order_status_idx'),
        ]

    def __str__(self):
        return f"Work order {self.id} - {self.process.name} [{self.status}]"

    @property
    def is_queued(self):
        return self.status == WorkOrderStatusChoices.QUEUED

    @property
    def is_active(self):
        return self.status == WorkOrderStatusChoices.ACTIVE

    @property
    def is_completed(self):
        return self.status == WorkOrderStatusChoices.COMPLETED

    @property
    def is_cancelled(self):
        return self.status == WorkOrderStatusChoices.CANCELLED

    @property
    def modules(self):
        return [choice.process_module for choice in self.module_choices.select_related('process_module')]

    def replace_modules(self, modules):
        """Swap the module choices for a new path"""
        self.module_choices.all().delete()
        WorkOrderModuleChoice.objects.bulk_create([
            WorkOrderModuleChoice(work_order=self, process_module=module, position=position)
            for position, module in enumerate(modules)
        ])

    def lims_payload(self):
        plan = self.work_plan
        return {
            'work_order': {
                'work_order_id': self.id,
                'work_order_uuid': str(self.work_order_uuid),
                'process_name': self.process.name,
                'modules': [module.name for module in self.modules],
                'set_uuid': self.set_uuid,
                'product_name': plan.product.name if plan.product else None,
                'project_id': plan.project_id,
                'owner_email': plan.owner_email,
                'desired_date': plan.desired_date.isoformat() if plan.desired_date else None,
                'comment': plan.comment,
                'total_cost': str(self.total_cost) if self.total_cost is not None else None,
            }
        }

    def event_payload(self, event_type):
        return {
            'event_type': str(event_type),
            'work_order_id': self.id,
            'work_order_uuid': str(self.work_order_uuid),
            'work_plan_uuid': str(self.work_plan.uuid),
            'process_name': self.process.name,
            'status': self.status,
            'set_uuid': self.set_uuid,
            'finished_set_uuid': self.finished_set_uuid,
            'total_cost': str(self.total_cost) if self.total_cost is not None else None,
            'owner_email': self.work_plan.owner_email,
        }


class WorkOrderModuleChoice(models.Model):
    """
    One module on the resolved path of a work order
    """
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='module_choices')
    process_module = models.ForeignKey(ProcessModule, on_delete=models.PROTECT, related_name='choices')
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ['work_order', 'position']
        unique_together = [['work_order', 'position']]

    def __str__(self):
        return f"{self.work_order_id}[{self.position}] {self.process_module.name}"
