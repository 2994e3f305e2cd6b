"""
Work Order Completion Service
Validates completion and cancellation messages and runs their steps
"""
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import transaction

from integrations.errors import IntegrationError
from utils.enums import WorkOrderEventTypeChoices

from .exceptions import StepFailure
from .models import WorkOrder
from .orchestrator import StepOrchestrator
from .schema import CompletionSchemaProvider
from .steps import build_cancellation_steps, build_completion_steps
from .validator import WorkOrderValidatorService

logger = logging.getLogger(__name__)

STEP_FAILURE_STATUS = 502


@dataclass
class CompletionResult:
    success: bool
    errors: dict = field(default_factory=dict)


def _work_order_id(msg):
    body = msg.get('work_order') if isinstance(msg, dict) else None
    return body.get('work_order_id') if isinstance(body, dict) else None


def _locked_work_order(work_order_id):
    if work_order_id is None:
        return None
    try:
        return WorkOrder.objects.select_for_update().filter(id=work_order_id).first()
    except (TypeError, ValueError):
        return None


class CompletionService:

    def __init__(self, clients, schema_provider=None):
        self.clients = clients
        self.schema_provider = schema_provider or CompletionSchemaProvider(clients.materials)

    def complete(self, msg):
        return self.finish(msg, build_completion_steps, WorkOrderEventTypeChoices.COMPLETED)

    def cancel(self, msg):
        return self.finish(msg, build_cancellation_steps, WorkOrderEventTypeChoices.CANCELLED)

    def finish(self, msg, build_steps, event_type):
        work_order_id = _work_order_id(msg)
        try:
            schema = self.schema_provider.get()
        except IntegrationError as e:
            logger.error(f"Completion schema unavailable: {e}")
            return self.failure(f"The message schema could not be fetched: {e}")

        with transaction.atomic():
            work_order = _locked_work_order(work_order_id)
            validator = WorkOrderValidatorService(work_order_id, msg, self.clients, schema, work_order=work_order)
            try:
                valid = validator.validate()
            except IntegrationError as e:
                logger.error(f"Validating work order {work_order_id} failed: {e}")
                return self.failure(f"The message could not be validated: {e}")
            if not valid:
                return CompletionResult(success=False, errors=validator.errors)

            try:
                StepOrchestrator().run(build_steps(work_order, msg, self.clients))
            except StepFailure as e:
                logger.error(f"Work order {work_order.id} could not be {event_type}: {e}")
                errors = {'msg': f"The work order could not be {event_type}: {e.cause}", 'status': STEP_FAILURE_STATUS}
                if e.compensation_errors:
                    errors['compensation'] = '; '.join(
                        f"{step.name}: {error}" for step, error in e.compensation_errors
                    )
                return CompletionResult(success=False, errors=errors)

            if settings.WORK_ORDERS_SETTINGS.get('PUBLISH_EVENTS', True):
                transaction.on_commit(lambda: self.publish(event_type, work_order))

        logger.info(f"Work order {work_order.id} {event_type}")
        return CompletionResult(success=True)

    def failure(self, message):
        return CompletionResult(success=False, errors={'msg': message, 'status': STEP_FAILURE_STATUS})

    def publish(self, event_type, work_order):
        try:
            self.clients.events.publish(event_type, work_order)
        except Exception as e:
            logger.error(f"{event_type} event for work order {work_order.id} could not be published: {e}",
                         exc_info=True)
