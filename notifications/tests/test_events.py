from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APITestCase

from integrations.dispatch import StoredEventSink
from integrations.fakes import fake_clients
from notifications.models import WorkOrderEvent
from utils.enums import DeliveryStatusChoices, WorkOrderEventTypeChoices
from work_orders.tests.helpers import create_active_order

User = get_user_model()


class WorkOrderEventTest(APITestCase):
    """Test cases for stored work order events"""

    def setUp(self):
        self.user = User.objects.create_user(username='lab', email='lab@example.com', password='testpass123')
        self.client.force_authenticate(user=self.user)
        self.work_order, _ = create_active_order(fake_clients())
        self.sink = StoredEventSink()

    def test_publish_stores_event(self):
        event = self.sink.publish_submitted(self.work_order)

        self.assertEqual(event.event_type, WorkOrderEventTypeChoices.SUBMITTED)
        self.assertEqual(event.delivery_status, DeliveryStatusChoices.SENT)
        self.assertEqual(event.payload['work_order_id'], self.work_order.id)
        self.assertEqual(event.payload['status'], 'active')
        self.assertEqual(event.payload['owner_email'], 'owner@example.com')

    def test_list_events(self):
        self.sink.publish_submitted(self.work_order)
        self.sink.publish(WorkOrderEventTypeChoices.COMPLETED, self.work_order)

        response = self.client.get(reverse('notifications:workorderevent-list'), {'event_type': 'completed'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['work_order'], self.work_order.id)
        self.assertEqual(WorkOrderEvent.objects.count(), 2)
