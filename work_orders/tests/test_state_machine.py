from django.test import SimpleTestCase

from utils.enums import WorkOrderEventChoices, WorkOrderStatusChoices, WorkPlanStatusChoices
from work_orders.exceptions import GuardViolation
from work_orders.state_machine import plan_status, transition

QUEUED = WorkOrderStatusChoices.QUEUED
ACTIVE = WorkOrderStatusChoices.ACTIVE
COMPLETED = WorkOrderStatusChoices.COMPLETED
CANCELLED = WorkOrderStatusChoices.CANCELLED


class TransitionTest(SimpleTestCase):

    def test_allowed_transitions(self):
        self.assertEqual(transition(QUEUED, WorkOrderEventChoices.DISPATCH), ACTIVE)
        self.assertEqual(transition(QUEUED, WorkOrderEventChoices.CANCEL), CANCELLED)
        self.assertEqual(transition(ACTIVE, WorkOrderEventChoices.COMPLETE), COMPLETED)
        self.assertEqual(transition(ACTIVE, WorkOrderEventChoices.CANCEL), CANCELLED)

    def test_plain_strings_are_accepted(self):
        self.assertEqual(transition('active', 'complete'), COMPLETED)

    def test_forbidden_transitions(self):
        forbidden = [
            (QUEUED, WorkOrderEventChoices.COMPLETE),
            (ACTIVE, WorkOrderEventChoices.DISPATCH),
            (COMPLETED, WorkOrderEventChoices.CANCEL),
            (COMPLETED, WorkOrderEventChoices.COMPLETE),
            (CANCELLED, WorkOrderEventChoices.DISPATCH),
        ]
        for status, event in forbidden:
            with self.subTest(status=status, event=event):
                with self.assertRaises(GuardViolation):
                    transition(status, event)

    def test_unknown_status_is_rejected(self):
        with self.assertRaises(GuardViolation) as raised:
            transition('broken', 'dispatch')
        self.assertEqual(str(raised.exception), "Cannot dispatch a work order that is broken")


class PlanStatusTest(SimpleTestCase):

    def test_no_orders_is_in_construction(self):
        self.assertEqual(plan_status([]), WorkPlanStatusChoices.IN_CONSTRUCTION)

    def test_all_queued_is_in_construction(self):
        self.assertEqual(plan_status([QUEUED, QUEUED]), WorkPlanStatusChoices.IN_CONSTRUCTION)

    def test_any_started_order_makes_plan_active(self):
        self.assertEqual(plan_status([ACTIVE, QUEUED]), WorkPlanStatusChoices.ACTIVE)
        self.assertEqual(plan_status([COMPLETED, QUEUED]), WorkPlanStatusChoices.ACTIVE)

    def test_all_completed_is_closed(self):
        self.assertEqual(plan_status([COMPLETED, COMPLETED]), WorkPlanStatusChoices.CLOSED)

    def test_cancelled_order_cancels_plan(self):
        self.assertEqual(plan_status([COMPLETED, CANCELLED]), WorkPlanStatusChoices.CANCELLED)
