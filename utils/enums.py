from django.db import models
from django.utils.translation import gettext_lazy as _


# ============================================================================
# CATALOGUE CHOICES
# ============================================================================

class ProductAvailabilityChoices(models.TextChoices):
    AVAILABLE = 'available', _('Available')
    SUSPENDED = 'suspended', _('Suspended')


# ============================================================================
# WORK PLAN & WORK ORDER CHOICES
# ============================================================================

class WorkOrderStatusChoices(models.TextChoices):
    QUEUED = 'queued', _('Queued')
    ACTIVE = 'active', _('Active')
    COMPLETED = 'completed', _('Completed')
    CANCELLED = 'cancelled', _('Cancelled')


class WorkPlanStatusChoices(models.TextChoices):
    IN_CONSTRUCTION = 'in_construction', _('In Construction')
    ACTIVE = 'active', _('Active')
    CLOSED = 'closed', _('Closed')
    CANCELLED = 'cancelled', _('Cancelled')


class WorkOrderEventChoices(models.TextChoices):
    DISPATCH = 'dispatch', _('Dispatch')
    COMPLETE = 'complete', _('Complete')
    CANCEL = 'cancel', _('Cancel')


# ============================================================================
# NOTIFICATION CHOICES
# ============================================================================

class WorkOrderEventTypeChoices(models.TextChoices):
    SUBMITTED = 'submitted', _('Work Order Submitted')
    COMPLETED = 'completed', _('Work Order Completed')
    CANCELLED = 'cancelled', _('Work Order Cancelled')


class DeliveryStatusChoices(models.TextChoices):
    PENDING = 'pending', _('Pending')
    SENT = 'sent', _('Sent')
    FAILED = 'failed', _('Failed')
