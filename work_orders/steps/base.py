import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from work_orders.exceptions import ExternalLookupFailure, WorkOrderError

logger = logging.getLogger(__name__)


@dataclass
class StepContext:
    """
    State shared by the steps of one completion or cancellation run
    """
    work_order: object
    msg: dict
    clients: object
    new_material_ids: list = field(default_factory=list)
    finished_set_uuid: str = None

    @property
    def body(self):
        return self.msg['work_order']

    @property
    def updated_material_ids(self):
        return [material['_id'] for material in self.body.get('updated_materials', [])]


class Step(ABC):
    name = 'step'

    def __init__(self, context):
        self.context = context

    @property
    def clients(self):
        return self.context.clients

    @abstractmethod
    def apply(self):
        pass

    @abstractmethod
    def compensate(self):
        pass

    def undo(self):
        """Compensate the partial work of a failed apply, keeping the original error"""
        try:
            self.compensate()
        except Exception as e:
            logger.error(f"Undoing {self.name} for work order {self.context.work_order.id} failed: {e}", exc_info=True)

    def __repr__(self):
        return f"<{self.__class__.__name__} work_order={self.context.work_order.id}>"


def run_all(actions):
    """
    Call every action even when some fail, then raise the first failure.
    """
    errors = []
    for description, action in actions:
        try:
            action()
        except Exception as e:
            logger.error(f"{description} failed: {e}", exc_info=True)
            errors.append(e)
    if errors:
        raise errors[0]


class ContainerPlacement:
    """
    Resolves containers by barcode and places materials in them, keeping the
    pre-image of every container it touches.
    """

    def __init__(self, registry):
        self.registry = registry
        self.containers = {}
        self.snapshots = {}

    def track(self, container):
        """Start tracking a registry container, keeping its pre-image"""
        if container.barcode not in self.containers:
            self.containers[container.barcode] = container
            self.snapshots[container.barcode] = container.snapshot()
        return self.containers[container.barcode]

    def resolve(self, barcode):
        if barcode not in self.containers:
            container = self.registry.find(barcode)
            if container is None:
                raise ExternalLookupFailure(f"Container {barcode} was not found in the registry")
            self.track(container)
        return self.containers[barcode]

    def detach(self, material_id):
        """
        Take a material out of the container currently holding it.
        Returns that container, or None when the material is not in one.
        """
        holder = self.registry.find_holding(material_id)
        if holder is None:
            return None
        container = self.track(holder)
        container.detach(material_id)
        return container

    def place(self, barcode, material_id, address=None):
        container = self.resolve(barcode)
        if address is not None:
            occupant = container.material_at(address)
            if occupant is not None and occupant != material_id:
                raise WorkOrderError(f"Slot {address} of container {barcode} already holds material {occupant}")
            container.assign_to_slot(address, material_id)
        elif container.is_slotted:
            free = container.next_free_address()
            if free is None:
                raise WorkOrderError(f"Container {barcode} has no free slot")
            container.assign_to_slot(free, material_id)
        else:
            if container.material_id is not None and container.material_id != material_id:
                raise WorkOrderError(f"Container {barcode} already holds material {container.material_id}")
            container.set_sole_occupant(material_id)

    def save(self):
        for container in self.containers.values():
            self.registry.save(container)

    def restore(self):
        def restorer(container, snapshot):
            def action():
                container.restore(snapshot)
                self.registry.save(container)
            return action

        run_all([
            (f"Restoring container {barcode}", restorer(self.containers[barcode], snapshot))
            for barcode, snapshot in self.snapshots.items()
        ])
