from django.utils import timezone

from utils.enums import WorkOrderEventChoices, WorkOrderStatusChoices
from work_orders import state_machine

from .base import Step

EVENTS = {
    WorkOrderStatusChoices.COMPLETED: WorkOrderEventChoices.COMPLETE,
    WorkOrderStatusChoices.CANCELLED: WorkOrderEventChoices.CANCEL,
}

FIELDS = ['status', 'comment', 'finished_set_uuid', 'completion_date']


class UpdateWorkOrderStep(Step):
    name = 'update work order'

    def __init__(self, context, target_status):
        super().__init__(context)
        self.target_status = target_status
        self.previous = None

    def apply(self):
        work_order = self.context.work_order
        status = state_machine.transition(work_order.status, EVENTS[self.target_status])

        self.previous = {field: getattr(work_order, field) for field in FIELDS}
        work_order.status = status
        work_order.comment = self.context.body.get('comment')
        work_order.finished_set_uuid = self.context.finished_set_uuid
        work_order.completion_date = timezone.now()
        work_order.save(update_fields=FIELDS + ['updated_at'])

    def compensate(self):
        if self.previous is None:
            return
        work_order = self.context.work_order
        for field, value in self.previous.items():
            setattr(work_order, field, value)
        work_order.save(update_fields=FIELDS + ['updated_at'])
        self.previous = None
