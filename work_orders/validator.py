"""
Completion message validation.

Checks that a work order completion (or cancellation) message is well formed
and consistent with the material and container registries before any step
runs. Every failed rule adds one entry to ``errors``; nothing is raised.
"""
import logging
from collections import Counter

from jsonschema.validators import validator_for

from .models import WorkOrder

logger = logging.getLogger(__name__)

VALIDATION_STATUS = 422


def _container_reference(material):
    container = material.get('container')
    if not isinstance(container, dict):
        return None
    return container.get('barcode'), container.get('address')


class WorkOrderValidatorService:

    def __init__(self, work_order_id, msg, clients, schema, work_order=None):
        self.work_order_id = work_order_id
        self.msg = msg
        self.clients = clients
        self.schema = schema
        self.errors = {}
        self._work_order = work_order

    def validate(self):
        self.errors = {}
        self.check_work_order()
        if self.check_schema():
            body = self.msg['work_order']
            self.check_updated_materials(body['updated_materials'])
            self.check_repeated_materials(body['updated_materials'])
            self.check_unique_barcodes(body['containers'])
            self.check_registered_containers(body['containers'])
            self.check_locations(body['new_materials'])
            self.check_missing_containers(body['new_materials'], body['containers'])
            self.check_unused_containers(body['new_materials'], body['containers'])

        if self.errors:
            self.errors['msg'] = '. '.join(self.errors.values())
            self.errors['status'] = VALIDATION_STATUS
            logger.info(f"Completion message for work order {self.work_order_id} rejected: {self.errors['msg']}")
            return False
        return True

    def add_error(self, category, message):
        self.errors[category] = message

    @property
    def work_order(self):
        if self._work_order is None and self.work_order_id is not None:
            try:
                self._work_order = WorkOrder.objects.filter(id=self.work_order_id).first()
            except (TypeError, ValueError):
                self._work_order = None
        return self._work_order

    def check_work_order(self):
        if self.work_order is None:
            self.add_error('work_order', f"Work order {self.work_order_id} does not exist")
        elif not self.work_order.is_active:
            self.add_error('work_order', f"Work order {self.work_order_id} is not active")

    def check_schema(self):
        validator_class = validator_for(self.schema)
        validator = validator_class(self.schema)
        problems = sorted(validator.iter_errors(self.msg), key=lambda e: list(e.absolute_path))
        if not problems:
            return True
        details = '; '.join(
            f"{'/'.join(str(part) for part in error.absolute_path) or 'message'}: {error.message}"
            for error in problems
        )
        self.add_error('schema', f"The message does not match the schema: {details}")
        return False

    def check_updated_materials(self, updated_materials):
        if self.work_order is None:
            return
        allowed = set()
        if self.work_order.set_uuid:
            work_order_set = self.clients.sets.find_with_materials(self.work_order.set_uuid)
            if work_order_set is not None:
                allowed = set(work_order_set.material_ids)
        received = {material['_id'] for material in updated_materials}
        if received != allowed:
            self.add_error(
                'materials',
                f"The updated materials do not match the materials of work order {self.work_order_id}"
            )

    def check_repeated_materials(self, updated_materials):
        counts = Counter(material['_id'] for material in updated_materials)
        repeated = sorted(material_id for material_id, count in counts.items() if count > 1)
        if repeated:
            self.add_error('repeated_materials', f"An updated material is repeated: {', '.join(repeated)}")

    def check_unique_barcodes(self, containers):
        counts = Counter(container['barcode'] for container in containers)
        repeated = sorted(barcode for barcode, count in counts.items() if count > 1)
        if repeated:
            self.add_error('barcodes', f"Container barcodes must be unique: {', '.join(repeated)}")

    def check_registered_containers(self, containers):
        changed = []
        checked = set()
        for container in containers:
            barcode = container['barcode']
            if barcode in checked:
                continue
            checked.add(barcode)
            registered = self.clients.containers.find(barcode)
            if registered is None:
                continue
            declared = (
                container.get('num_of_rows'),
                container.get('num_of_cols'),
                container.get('row_is_alpha'),
                container.get('col_is_alpha'),
            )
            if declared != registered.shape:
                changed.append(barcode)
        if len(changed) == 1:
            self.add_error('containers', f"Container {changed[0]} is different from the one in the registry")
        elif changed:
            self.add_error(
                'containers',
                f"Containers {', '.join(changed)} are different from the ones in the registry"
            )

    def check_locations(self, new_materials):
        references = [_container_reference(material) for material in new_materials]
        references = [reference for reference in references if reference]

        addressed = Counter(reference for reference in references if reference[1] is not None)
        bare = Counter(barcode for barcode, address in references if address is None)
        addressed_barcodes = {barcode for barcode, _ in addressed}

        conflicts = [f"{barcode} {address}" for (barcode, address), count in addressed.items() if count > 1]
        conflicts += [barcode for barcode, count in bare.items() if count > 1]
        conflicts += [f"{barcode} (with and without address)" for barcode in bare if barcode in addressed_barcodes]
        if conflicts:
            self.add_error(
                'locations',
                f"New materials have conflicting container locations: {', '.join(sorted(conflicts))}"
            )

    def check_missing_containers(self, new_materials, containers):
        listed = {container['barcode'] for container in containers}
        referenced = {reference[0] for reference in map(_container_reference, new_materials) if reference}
        missing = sorted(referenced - listed)
        if missing:
            self.add_error(
                'missing_containers',
                f"Some new material locations are not listed in containers: {', '.join(missing)}"
            )

    def check_unused_containers(self, new_materials, containers):
        referenced = {reference[0] for reference in map(_container_reference, new_materials) if reference}
        unused = sorted({container['barcode'] for container in containers} - referenced)
        if unused:
            self.add_error(
                'unused_containers',
                f"Some containers are not used as locations for new materials: {', '.join(unused)}"
            )
