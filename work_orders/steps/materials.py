import json
import logging

from .base import ContainerPlacement, Step, run_all

logger = logging.getLogger(__name__)


def _attributes(material):
    return {key: value for key, value in material.items() if key not in ('container', '_id')}


class CreateNewMaterialsStep(Step):
    """
    Create the new materials of the message and put them in their containers.
    Materials with the same attributes are created in one registry call.
    """
    name = 'create new materials'

    def __init__(self, context):
        super().__init__(context)
        self.materials = []
        self.placement = ContainerPlacement(self.clients.containers)

    def apply(self):
        new_materials = self.context.body.get('new_materials', [])
        for entry in new_materials:
            if entry.get('container'):
                self.placement.resolve(entry['container']['barcode'])

        try:
            self._create(new_materials)
            for entry, material in zip(new_materials, self.materials):
                reference = entry.get('container')
                if reference:
                    self.placement.place(reference['barcode'], material.id, reference.get('address'))
            self.placement.save()
        except Exception:
            logger.warning(f"Creating new materials for work order {self.context.work_order.id} failed, undoing")
            self.undo()
            raise

        self.context.new_material_ids = [material.id for material in self.materials]

    def _create(self, new_materials):
        groups = {}
        for index, entry in enumerate(new_materials):
            key = json.dumps(_attributes(entry), sort_keys=True, default=str)
            groups.setdefault(key, []).append(index)

        created = [None] * len(new_materials)
        self.materials = created
        for key, indexes in groups.items():
            attributes = json.loads(key)
            attributes.setdefault('available', True)
            records = self.clients.materials.create([dict(attributes) for _ in indexes])
            for index, record in zip(indexes, records):
                created[index] = record
        logger.info(f"Created {len(created)} materials for work order {self.context.work_order.id}")

    def compensate(self):
        created = [material for material in self.materials if material is not None]
        run_all(
            [("Restoring containers", self.placement.restore)] +
            [(f"Destroying material {material.id}",
              lambda material=material: self.clients.materials.destroy(material.id))
             for material in created]
        )
        self.materials = []
        self.context.new_material_ids = []


class RelocateMaterialsStep(Step):
    """
    Move updated materials carrying a container reference into that
    container, taking them out of the container that held them before.
    """
    name = 'relocate materials'

    def __init__(self, context):
        super().__init__(context)
        self.placement = ContainerPlacement(self.clients.containers)

    def apply(self):
        moves = [
            (material['_id'], material['container'])
            for material in self.context.body.get('updated_materials', [])
            if material.get('container')
        ]
        for _, reference in moves:
            self.placement.resolve(reference['barcode'])
        try:
            for material_id, reference in moves:
                holder = self.placement.detach(material_id)
                if holder is not None:
                    logger.info(f"Moving material {material_id} from {holder.barcode} to {reference['barcode']}")
                self.placement.place(reference['barcode'], material_id, reference.get('address'))
            self.placement.save()
        except Exception:
            self.undo()
            raise

    def compensate(self):
        self.placement.restore()


class UpdateOldMaterialsStep(Step):
    """
    Apply the new attributes of the updated materials. Compensation writes
    back the prior values; attributes the material did not have before come
    back as null, since the registry offers no way to remove a field.
    """
    name = 'update old materials'

    def __init__(self, context):
        super().__init__(context)
        self.previous = {}
        self.absent = {}

    def apply(self):
        try:
            for entry in self.context.body.get('updated_materials', []):
                attributes = _attributes(entry)
                if not attributes:
                    continue
                material = self.clients.materials.get(entry['_id'])
                current = material.attributes if material else {}
                prior = {key: current[key] for key in attributes if key in current}
                absent = [key for key in attributes if key not in current]
                self.clients.materials.update(entry['_id'], attributes)
                self.previous[entry['_id']] = prior
                self.absent[entry['_id']] = absent
        except Exception:
            self.undo()
            raise

    def restore_values(self, material_id):
        values = dict(self.previous[material_id])
        values.update({key: None for key in self.absent.get(material_id, [])})
        return values

    def compensate(self):
        run_all([
            (f"Restoring material {material_id}",
             lambda material_id=material_id: self.clients.materials.update(
                 material_id, self.restore_values(material_id)))
            for material_id in self.previous
        ])
        self.previous = {}
        self.absent = {}
