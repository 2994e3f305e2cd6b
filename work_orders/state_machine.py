"""
Work order lifecycle transitions and the derived work plan status
"""
from utils.enums import WorkOrderEventChoices, WorkOrderStatusChoices, WorkPlanStatusChoices

from .exceptions import GuardViolation

TRANSITIONS = {
    (WorkOrderStatusChoices.QUEUED, WorkOrderEventChoices.DISPATCH): WorkOrderStatusChoices.ACTIVE,
    (WorkOrderStatusChoices.QUEUED, WorkOrderEventChoices.CANCEL): WorkOrderStatusChoices.CANCELLED,
    (WorkOrderStatusChoices.ACTIVE, WorkOrderEventChoices.COMPLETE): WorkOrderStatusChoices.COMPLETED,
    (WorkOrderStatusChoices.ACTIVE, WorkOrderEventChoices.CANCEL): WorkOrderStatusChoices.CANCELLED,
}


def transition(status, event):
    """
    Return the status reached from ``status`` through ``event``.
    Raises GuardViolation for a transition the lifecycle does not allow.
    """
    try:
        return TRANSITIONS[(WorkOrderStatusChoices(status), WorkOrderEventChoices(event))]
    except (KeyError, ValueError):
        raise GuardViolation(f"Cannot {event} a work order that is {status}")


def plan_status(order_statuses):
    statuses = list(order_statuses)
    if not statuses or all(status == WorkOrderStatusChoices.QUEUED for status in statuses):
        return WorkPlanStatusChoices.IN_CONSTRUCTION
    if any(status == WorkOrderStatusChoices.CANCELLED for status in statuses):
        return WorkPlanStatusChoices.CANCELLED
    if all(status == WorkOrderStatusChoices.COMPLETED for status in statuses):
        return WorkPlanStatusChoices.CLOSED
    return WorkPlanStatusChoices.ACTIVE
