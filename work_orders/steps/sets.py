import logging

from .base import Step

logger = logging.getLogger(__name__)


class CreateFinishedSetStep(Step):
    """
    Collect every new and updated material of a completed work order in a
    locked set, which becomes the source set of the next work order.
    """
    name = 'create finished set'

    def __init__(self, context):
        super().__init__(context)
        self.set_uuid = None

    def apply(self):
        work_order = self.context.work_order
        material_ids = list(self.context.new_material_ids) + self.context.updated_material_ids
        finished_set = self.clients.sets.create(f"Work Order {work_order.id} finished")
        self.set_uuid = finished_set.id
        try:
            if material_ids:
                self.clients.sets.add_materials(finished_set.id, material_ids)
            self.clients.sets.lock(finished_set.id)
        except Exception:
            self.undo()
            raise
        self.context.finished_set_uuid = finished_set.id
        logger.info(f"Finished set {finished_set.id} holds {len(material_ids)} materials of work order {work_order.id}")

    def compensate(self):
        if self.set_uuid is not None:
            self.clients.sets.destroy(self.set_uuid)
        self.set_uuid = None
        self.context.finished_set_uuid = None
