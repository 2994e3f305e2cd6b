"""
Deterministic in-memory doubles of the external collaborators.
Used by the test suite and by local development with
``CLIENT_CLASSES`` pointing here.
"""
import copy
import uuid
from decimal import Decimal

from . import Clients
from .billing import BillingService
from .dispatch import DispatchSink, EventSink
from .errors import ExternalServiceError, NotFoundError
from .materials import Container, ContainerRegistry, Material, MaterialRegistry
from .projects import Project, ProjectDirectory
from .sets import SetRecord, SetService


MATERIAL_SCHEMA = {
    'required': ['gender', 'donor_id', 'phenotype', 'supplier_name', 'common_name'],
    'type': 'object',
    'properties': {
        'gender': {'required': True, 'type': 'string', 'enum': ['male', 'female', 'unknown']},
        'date_of_receipt': {'type': 'string', 'format': 'date'},
        'material_type': {'enum': ['blood', 'dna'], 'type': 'string'},
        'donor_id': {'required': True, 'type': 'string'},
        'phenotype': {'required': True, 'type': 'string'},
        'supplier_name': {'required': True, 'type': 'string'},
        'common_name': {'required': True, 'type': 'string', 'enum': ['Homo Sapiens', 'Mouse']},
        'parents': {
            'type': 'list',
            'schema': {
                'type': 'uuid',
                'data_relation': {'field': '_id', 'resource': 'materials', 'embeddable': True}
            }
        },
        'owner_id': {'type': 'string'},
    },
}

CONTAINER_SCHEMA = {
    'required': ['num_of_cols', 'num_of_rows', 'col_is_alpha', 'row_is_alpha'],
    'type': 'object',
    'properties': {
        'num_of_cols': {'max': 9999, 'col_alpha_range': True, 'required': True, 'type': 'integer', 'min': 1},
        'barcode': {'non_aker_barcode': True, 'minlength': 6, 'unique': True, 'type': 'string'},
        'num_of_rows': {'row_alpha_range': True, 'max': 9999, 'required': True, 'type': 'integer', 'min': 1},
        'col_is_alpha': {'required': True, 'type': 'boolean'},
        'print_count': {'max': 9999, 'required': False, 'type': 'integer', 'min': 0},
        'row_is_alpha': {'required': True, 'type': 'boolean'},
        'slots': {
            'uniqueaddresses': True,
            'type': 'list',
            'schema': {
                'type': 'dict',
                'schema': {
                    'material': {
                        'type': 'uuid',
                        'data_relation': {'field': '_id', 'resource': 'materials', 'embeddable': True}
                    },
                    'address': {'type': 'string', 'address': True},
                },
            },
        },
    },
}


class _Sequence:
    def __init__(self, start=1):
        self.counter = start

    def next_id(self):
        value = str(uuid.UUID(int=self.counter))
        self.counter += 1
        return value


class FailureMixin:
    """
    ``fail_on('create')`` makes the next calls of that operation raise.
    """

    def fail_on(self, operation, error=None):
        if not hasattr(self, '_failures'):
            self._failures = {}
        self._failures[operation] = error or ExternalServiceError(self.__class__.__name__, f"{operation} failed")

    def _check(self, operation):
        error = getattr(self, '_failures', {}).get(operation)
        if error is not None:
            raise error


class FakeMaterialRegistry(FailureMixin, MaterialRegistry):

    def __init__(self, material_schema=None, patch_schema=None, container_schema=None):
        self.records = {}
        self.destroyed = []
        self.schemas = {
            ('materials', False): material_schema or copy.deepcopy(MATERIAL_SCHEMA),
            ('materials', True): patch_schema or material_schema or copy.deepcopy(MATERIAL_SCHEMA),
            ('containers', False): container_schema or copy.deepcopy(CONTAINER_SCHEMA),
        }
        self.schema_requests = 0
        self.create_calls = 0
        self._sequence = _Sequence(1)

    @property
    def count(self):
        return len(self.records)

    def add(self, attributes=None, material_id=None, available=True):
        """Seed an existing material"""
        attributes = dict(attributes or {})
        attributes.setdefault('available', available)
        material_id = material_id or self._sequence.next_id()
        self.records[material_id] = attributes
        return Material(id=material_id, attributes=dict(attributes))

    def create(self, attributes):
        self._check('create')
        self.create_calls += 1
        many = isinstance(attributes, list)
        created = []
        for attrs in (attributes if many else [attributes]):
            material_id = self._sequence.next_id()
            self.records[material_id] = dict(attrs)
            created.append(Material(id=material_id, attributes=dict(attrs)))
        return created if many else created[0]

    def destroy(self, material_id):
        self._check('destroy')
        if material_id not in self.records:
            raise NotFoundError(f"Material {material_id} not found")
        del self.records[material_id]
        self.destroyed.append(material_id)
        return True

    def find(self, material_ids):
        return [
            Material(id=material_id, attributes=dict(self.records[material_id]))
            for material_id in material_ids if material_id in self.records
        ]

    def get(self, material_id):
        if material_id not in self.records:
            return None
        return Material(id=material_id, attributes=dict(self.records[material_id]))

    def update(self, material_id, attributes):
        self._check('update')
        if material_id not in self.records:
            raise NotFoundError(f"Material {material_id} not found")
        self.records[material_id].update(attributes)
        return self.get(material_id)

    def json_schema(self, resource, patch=False):
        self._check('json_schema')
        self.schema_requests += 1
        return copy.deepcopy(self.schemas[(resource, patch)])


class FakeContainerRegistry(FailureMixin, ContainerRegistry):

    def __init__(self):
        self.records = {}
        self._sequence = _Sequence(10 ** 6)

    def add(self, barcode, num_of_rows=1, num_of_cols=1, row_is_alpha=False, col_is_alpha=False, **extra):
        container = Container(
            id=self._sequence.next_id(),
            barcode=barcode,
            num_of_rows=num_of_rows,
            num_of_cols=num_of_cols,
            row_is_alpha=row_is_alpha,
            col_is_alpha=col_is_alpha,
            **extra
        )
        self.records[barcode] = container
        return copy.deepcopy(container)

    def vanish(self, barcode):
        self.records.pop(barcode, None)

    def find(self, barcode):
        self._check('find')
        container = self.records.get(barcode)
        return copy.deepcopy(container) if container else None

    def find_holding(self, material_id):
        self._check('find_holding')
        for container in self.records.values():
            if container.holds(material_id):
                return copy.deepcopy(container)
        return None

    def create(self, attributes):
        self._check('create')
        return self.add(
            attributes['barcode'],
            num_of_rows=attributes.get('num_of_rows', 1),
            num_of_cols=attributes.get('num_of_cols', 1),
            row_is_alpha=attributes.get('row_is_alpha', False),
            col_is_alpha=attributes.get('col_is_alpha', False),
        )

    def destroy(self, container_id):
        self._check('destroy')
        for barcode, container in list(self.records.items()):
            if container.id == container_id:
                del self.records[barcode]
                return True
        raise NotFoundError(f"Container {container_id} not found")

    def save(self, container):
        self._check('save')
        if container.barcode not in self.records:
            raise NotFoundError(f"Container {container.barcode} not found")
        self.records[container.barcode] = copy.deepcopy(container)
        return container


class FakeSetService(FailureMixin, SetService):

    def __init__(self):
        self.records = {}
        self.clones = []
        self._sequence = _Sequence(2 * 10 ** 6)

    def add(self, name='set', material_ids=None, locked=False, set_id=None):
        record = SetRecord(
            id=set_id or self._sequence.next_id(),
            name=name,
            locked=locked,
            material_ids=list(material_ids or [])
        )
        self.records[record.id] = record
        return copy.deepcopy(record)

    def find(self, set_id):
        self._check('find')
        record = self.records.get(set_id)
        if record is None:
            return None
        return SetRecord(id=record.id, name=record.name, locked=record.locked)

    def find_with_materials(self, set_id):
        self._check('find_with_materials')
        record = self.records.get(set_id)
        return copy.deepcopy(record) if record else None

    def lock_clone(self, set_id):
        self._check('lock_clone')
        if set_id not in self.records:
            raise NotFoundError(f"Set {set_id} not found")
        original = self.records[set_id]
        clone = self.add(f"{original.name} locked clone", original.material_ids, locked=True)
        self.clones.append((set_id, clone.id))
        return clone.id

    def create(self, name):
        self._check('create')
        return self.add(name)

    def add_materials(self, set_id, material_ids):
        self._check('add_materials')
        self.records[set_id].material_ids.extend(material_ids)

    def lock(self, set_id):
        self._check('lock')
        self.records[set_id].locked = True

    def destroy(self, set_id):
        self._check('destroy')
        self.records.pop(set_id, None)
        return True


class FakeProjectDirectory(ProjectDirectory):

    def __init__(self):
        self.records = {}

    def add(self, project_id, cost_code='S1234', name=None):
        project = Project(id=project_id, name=name or f"Project {project_id}", cost_code=cost_code)
        self.records[project_id] = project
        return project

    def find(self, project_id):
        return self.records.get(project_id)


class FakeBillingService(BillingService):

    def __init__(self, valid_codes=None, prices=None):
        self.valid_codes = set(valid_codes or ['S1234'])
        self.prices = dict(prices or {})
        self.default_price = Decimal('10.00')
        self.uncostable = set()

    def validate_cost_code(self, cost_code):
        return bool(cost_code) and cost_code in self.valid_codes

    def cost_for_module(self, module_name, cost_code):
        if module_name in self.uncostable or cost_code not in self.valid_codes:
            return None
        return self.prices.get(module_name, self.default_price)


class FakeDispatchSink(FailureMixin, DispatchSink):

    def __init__(self):
        self.sent = []

    def send(self, work_order):
        self._check('send')
        self.sent.append(work_order.id)
        return True


class FakeEventSink(FailureMixin, EventSink):

    def __init__(self):
        self.published = []

    def publish(self, event_type, work_order):
        self._check('publish')
        self.published.append((str(event_type), work_order.id))


def fake_clients(**overrides):
    clients = {
        'materials': FakeMaterialRegistry(),
        'containers': FakeContainerRegistry(),
        'sets': FakeSetService(),
        'projects': FakeProjectDirectory(),
        'billing': FakeBillingService(),
        'dispatch': FakeDispatchSink(),
        'events': FakeEventSink(),
    }
    clients.update(overrides)
    return Clients(**clients)
