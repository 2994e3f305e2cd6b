import logging

from .base import Step, run_all

logger = logging.getLogger(__name__)

SHAPE_FIELDS = ('barcode', 'num_of_rows', 'num_of_cols', 'row_is_alpha', 'col_is_alpha')


class CreateContainersStep(Step):
    """Register the message containers the registry does not know yet"""
    name = 'create containers'

    def __init__(self, context):
        super().__init__(context)
        self.created = []

    def apply(self):
        for definition in self.context.body.get('containers', []):
            if self.clients.containers.find(definition['barcode']) is not None:
                continue
            attributes = {key: definition[key] for key in SHAPE_FIELDS if key in definition}
            container = self.clients.containers.create(attributes)
            self.created.append(container)
            logger.info(f"Created container {container.barcode} for work order {self.context.work_order.id}")

    def compensate(self):
        run_all([
            (f"Destroying container {container.barcode}",
             lambda container=container: self.clients.containers.destroy(container.id))
            for container in reversed(self.created)
        ])
        self.created = []
