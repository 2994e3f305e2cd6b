"""
Work Plan Service
Handles project, set and product selection, order reconfiguration and dispatch
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from catalogue.models import Product
from integrations.errors import IntegrationError
from utils.enums import WorkOrderEventChoices, WorkOrderStatusChoices

from . import state_machine
from .exceptions import ExternalLookupFailure, GuardViolation
from .models import WorkOrder

logger = logging.getLogger(__name__)


@dataclass
class SelectProject:
    project_id: int


@dataclass
class SelectSet:
    set_uuid: str


@dataclass
class SelectProduct:
    product_id: Optional[int]
    product_options: List[List[int]] = field(default_factory=list)
    comment: Optional[str] = None
    desired_date: Optional[date] = None


@dataclass
class UpdateOrderModules:
    work_order_id: int
    module_ids: List[int]


@dataclass
class DispatchOrder:
    work_order_id: int
    module_ids: Optional[List[int]] = None


class UpdatePlanService:
    """
    Applies one configuration or lifecycle request to a work plan.
    ``perform`` returns False and sets ``error`` when a guard fails; in that
    case nothing in the plan or its orders has changed.
    """

    def __init__(self, plan, clients):
        self.plan = plan
        self.clients = clients
        self.error = None

    def perform(self, request):
        self.error = None
        handlers = {
            SelectProject: self.select_project,
            SelectSet: self.select_set,
            SelectProduct: self.select_product,
            UpdateOrderModules: self.update_order_modules,
            DispatchOrder: self.dispatch_order,
        }
        try:
            handlers[type(request)](request)
        except GuardViolation as e:
            self.error = str(e)
        except ValidationError as e:
            self.error = ' '.join(e.messages)
        except IntegrationError as e:
            self.error = f"A remote service failed: {e}"

        if self.error:
            logger.info(f"Work plan {self.plan.id}: {type(request).__name__} rejected: {self.error}")
            self.plan.refresh_from_db()
            return False
        return True

    # ------------------------------------------------------------------
    # Guards and lookups
    # ------------------------------------------------------------------

    def check_in_construction(self):
        if not self.plan.is_in_construction:
            raise GuardViolation("This work plan is already in progress")

    def find_project(self, project_id):
        project = self.clients.projects.find(project_id)
        if project is None:
            raise ExternalLookupFailure(f"Project {project_id} could not be found")
        return project

    def checked_cost_code(self, project):
        if not project.cost_code:
            raise ExternalLookupFailure(f"Project {project.id} has no cost code")
        if not self.clients.billing.validate_cost_code(project.cost_code):
            raise ExternalLookupFailure(f"The cost code {project.cost_code} of project {project.id} is not valid")
        return project.cost_code

    def plan_cost_code(self):
        if self.plan.project_id is None:
            raise GuardViolation("Please select a project for this work plan")
        return self.checked_cost_code(self.find_project(self.plan.project_id))

    def module_costs(self, modules, cost_code):
        """Unit cost of each module; every module must be costable"""
        costs = {}
        uncostable = []
        for module in modules:
            cost = self.clients.billing.cost_for_module(module.name, cost_code)
            if cost is None:
                uncostable.append(module.name)
            else:
                costs[module.id] = Decimal(str(cost))
        if uncostable:
            raise ExternalLookupFailure(
                f"The following modules could not be costed with cost code {cost_code}: {', '.join(uncostable)}"
            )
        return costs

    def dispatch_set(self, set_uuid, reusable=None):
        """A locked set for ``set_uuid``: the set itself, a reusable clone, or a new locked clone"""
        if reusable:
            return reusable
        found = self.clients.sets.find(set_uuid)
        if found is None:
            raise ExternalLookupFailure(f"Set {set_uuid} could not be found")
        if found.locked:
            return found.id
        return self.clients.sets.lock_clone(set_uuid)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def select_project(self, request):
        self.check_in_construction()
        if not self.plan.original_set_uuid:
            raise GuardViolation("Please select a set before selecting a project")
        project = self.find_project(request.project_id)
        self.checked_cost_code(project)

        self.plan.project_id = project.id
        self.plan.save(update_fields=['project_id', 'updated_at'])
        logger.info(f"Work plan {self.plan.id} now belongs to project {project.id}")

    def select_set(self, request):
        self.check_in_construction()
        found = self.clients.sets.find(request.set_uuid)
        if found is None:
            raise ExternalLookupFailure(f"Set {request.set_uuid} could not be found")

        first = self.plan.ordered_orders().first()
        set_uuid = None
        if first is not None and first.is_queued:
            set_uuid = self.dispatch_set(found.id)

        with transaction.atomic():
            self.plan.original_set_uuid = found.id
            self.plan.save(update_fields=['original_set_uuid', 'updated_at'])
            if set_uuid is not None:
                first.original_set_uuid = found.id
                first.set_uuid = set_uuid
                first.save(update_fields=['original_set_uuid', 'set_uuid', 'updated_at'])

    def select_product(self, request):
        self.check_in_construction()
        if not self.plan.original_set_uuid:
            raise GuardViolation("Please select a set before selecting a product")
        if self.plan.project_id is None:
            raise GuardViolation("Please select a project before selecting a product")

        product = Product.objects.filter(id=request.product_id).first() if request.product_id else None
        if product is None:
            raise GuardViolation("Invalid product selection")
        if not product.is_available:
            raise GuardViolation(f"Invalid product selection: {product.name} is not available")

        processes = product.processes
        options = request.product_options or []
        if not processes or len(options) != len(processes) or not all(options):
            raise GuardViolation("Invalid product options: choose modules for every process")

        paths = [process.resolve_modules(module_ids) for process, module_ids in zip(processes, options)]
        cost_code = self.plan_cost_code()
        self.module_costs([module for path in paths for module in path], cost_code)

        old_first = self.plan.ordered_orders().first()
        reusable = None
        if old_first is not None and old_first.original_set_uuid == self.plan.original_set_uuid:
            reusable = old_first.set_uuid
        set_uuid = self.dispatch_set(self.plan.original_set_uuid, reusable)

        with transaction.atomic():
            self.plan.work_orders.filter(status=WorkOrderStatusChoices.QUEUED).delete()
            for index, (process, modules) in enumerate(zip(processes, paths)):
                order = WorkOrder.objects.create(
                    work_plan=self.plan,
                    process=process,
                    order_index=index,
                    original_set_uuid=self.plan.original_set_uuid if index == 0 else None,
                    set_uuid=set_uuid if index == 0 else None,
                )
                order.replace_modules(modules)

            self.plan.product = product
            self.plan.comment = request.comment
            self.plan.desired_date = request.desired_date
            self.plan.save(update_fields=['product', 'comment', 'desired_date', 'updated_at'])

        logger.info(f"Work plan {self.plan.id} configured with product {product.name} ({len(processes)} orders)")

    def order_for(self, work_order_id, lock=False):
        orders = WorkOrder.objects.select_related('process')
        if lock:
            orders = orders.select_for_update()
        order = orders.filter(work_plan=self.plan, id=work_order_id).first()
        if order is None:
            raise ExternalLookupFailure(f"Work order {work_order_id} does not belong to this plan")
        return order

    def update_order_modules(self, request):
        with transaction.atomic():
            order = self.order_for(request.work_order_id, lock=True)
            if not order.is_queued:
                raise GuardViolation(f"Work order {order.id} cannot be updated because it is {order.status}")
            self.reconfigure(order, request.module_ids)

    def reconfigure(self, order, module_ids):
        modules = order.process.resolve_modules(module_ids)
        self.module_costs(modules, self.plan_cost_code())
        order.replace_modules(modules)
        return modules

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch_order(self, request):
        config = settings.WORK_ORDERS_SETTINGS
        with transaction.atomic():
            orders = list(
                WorkOrder.objects.select_for_update()
                .filter(work_plan=self.plan)
                .order_by('order_index')
            )
            order = next((o for o in orders if o.id == request.work_order_id), None)
            if order is None:
                raise ExternalLookupFailure(f"Work order {request.work_order_id} does not belong to this plan")
            self.check_dispatchable(order, orders)

            if request.module_ids:
                modules = self.reconfigure(order, request.module_ids)
            else:
                modules = order.modules

            previous = orders[orders.index(order) - 1] if orders.index(order) > 0 else None
            source = order.set_uuid or (previous.finished_set_uuid if previous else None)
            if not source:
                raise GuardViolation(f"Work order {order.id} has no set to work on")

            contents = self.clients.sets.find_with_materials(source)
            if contents is None:
                raise ExternalLookupFailure(f"Set {source} could not be found")
            if contents.is_empty:
                raise GuardViolation(f"The set {source} is empty")
            materials = self.clients.materials.find(contents.material_ids)
            if len(materials) != len(contents.material_ids) or not all(m.available for m in materials):
                raise GuardViolation(f"Some materials in set {source} are not available")

            costs = self.module_costs(modules, self.plan_cost_code())

            order.original_set_uuid = order.original_set_uuid or source
            order.set_uuid = self.dispatch_set(source, reusable=order.set_uuid)
            order.total_cost = sum(costs.values(), Decimal('0')) * len(contents.material_ids)
            order.dispatch_date = timezone.now()
            order.status = state_machine.transition(order.status, WorkOrderEventChoices.DISPATCH)
            order.save()

            if config.get('SEND_TO_LIMS', True):
                self.clients.dispatch.send(order)

            if config.get('PUBLISH_EVENTS', True):
                transaction.on_commit(lambda: self.publish_submitted(order))

        logger.info(f"Work order {order.id} dispatched at a cost of {order.total_cost}")

    def check_dispatchable(self, order, orders):
        """
        Only the first order that is not completed may be dispatched, and
        only while it is queued.
        """
        if not order.is_queued:
            raise GuardViolation(f"Work order {order.id} cannot be dispatched because it is {order.status}")
        for earlier in orders:
            if earlier.id == order.id:
                break
            if not earlier.is_completed:
                raise GuardViolation(
                    f"Work order {order.id} cannot be dispatched before work order {earlier.id} is completed"
                )

    def publish_submitted(self, order):
        try:
            self.clients.events.publish_submitted(order)
        except Exception as e:
            logger.error(f"Submitted event for work order {order.id} could not be published: {e}", exc_info=True)
