"""
Outbound sinks: downstream processing (LIMS) and lifecycle events
"""
import logging
from abc import ABC, abstractmethod

from utils.enums import DeliveryStatusChoices, WorkOrderEventTypeChoices

from .http import ServiceClient

logger = logging.getLogger(__name__)


class DispatchSink(ABC):

    @abstractmethod
    def send(self, work_order):
        """Hand a dispatched work order to downstream processing"""


class EventSink(ABC):

    @abstractmethod
    def publish(self, event_type, work_order):
        pass

    def publish_submitted(self, work_order):
        return self.publish(WorkOrderEventTypeChoices.SUBMITTED, work_order)


class HttpDispatchSink(ServiceClient, DispatchSink):
    service_name = 'LIMS'
    url_setting = 'LIMS_URL'

    def send(self, work_order):
        payload = work_order.lims_payload()
        self.http_post('', payload)
        logger.info(f"Work order {work_order.id} sent to LIMS")
        return True


class StoredEventSink(EventSink):
    """
    Records every event as a notifications.WorkOrderEvent row
    """

    def publish(self, event_type, work_order):
        from notifications.models import WorkOrderEvent

        event = WorkOrderEvent.objects.create(
            event_type=event_type,
            work_order=work_order,
            payload=work_order.event_payload(event_type),
            delivery_status=DeliveryStatusChoices.SENT
        )
        logger.info(f"Published {event_type} event for work order {work_order.id}")
        return event
