"""
Material and container registry clients.

The registry is an Eve service: resources live under ``materials`` and
``containers`` and each publishes its schema at ``<resource>/json_schema``.
"""
import copy
import json
import logging
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .http import ServiceClient

logger = logging.getLogger(__name__)


def _labels(count, alpha):
    if not alpha:
        return [str(i) for i in range(1, count + 1)]
    labels = []
    for i in range(count):
        label = ''
        n = i + 1
        while n:
            n, remainder = divmod(n - 1, 26)
            label = string.ascii_uppercase[remainder] + label
        labels.append(label)
    return labels


@dataclass
class Material:
    id: str
    attributes: dict = field(default_factory=dict)

    @property
    def available(self):
        return bool(self.attributes.get('available'))

    @classmethod
    def from_dict(cls, data):
        attributes = {key: value for key, value in data.items() if not key.startswith('_')}
        return cls(id=data['_id'], attributes=attributes)


@dataclass
class Container:
    """
    A registry container. Containers with more than one position are slotted
    (plates) and hold materials by address; the rest hold a sole occupant (tubes).
    """
    id: str
    barcode: str
    num_of_rows: int = 1
    num_of_cols: int = 1
    row_is_alpha: bool = False
    col_is_alpha: bool = False
    slots: list = field(default_factory=list)
    material_id: str = None

    @property
    def is_slotted(self):
        return self.num_of_rows * self.num_of_cols > 1

    @property
    def shape(self):
        return (self.num_of_rows, self.num_of_cols, self.row_is_alpha, self.col_is_alpha)

    @property
    def addresses(self):
        rows = _labels(self.num_of_rows, self.row_is_alpha)
        cols = _labels(self.num_of_cols, self.col_is_alpha)
        return [f"{row}:{col}" for row in rows for col in cols]

    def material_at(self, address):
        for slot in self.slots:
            if slot.get('address') == address:
                return slot.get('material')
        return None

    def assign_to_slot(self, address, material_id):
        if address not in self.addresses:
            raise ValueError(f"Address {address} does not exist in container {self.barcode}")
        for slot in self.slots:
            if slot.get('address') == address:
                slot['material'] = material_id
                return
        self.slots.append({'address': address, 'material': material_id})

    def set_sole_occupant(self, material_id):
        self.material_id = material_id

    def next_free_address(self):
        for address in self.addresses:
            if self.material_at(address) is None:
                return address
        return None

    def detach(self, material_id):
        """Remove a material from wherever it sits in this container"""
        if self.material_id == material_id:
            self.material_id = None
        self.slots = [slot for slot in self.slots if slot.get('material') != material_id]

    def holds(self, material_id):
        if self.material_id == material_id:
            return True
        return any(slot.get('material') == material_id for slot in self.slots)

    def snapshot(self):
        return {'slots': copy.deepcopy(self.slots), 'material_id': self.material_id}

    def restore(self, snapshot):
        self.slots = copy.deepcopy(snapshot['slots'])
        self.material_id = snapshot['material_id']

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('_id'),
            barcode=data['barcode'],
            num_of_rows=data.get('num_of_rows', 1),
            num_of_cols=data.get('num_of_cols', 1),
            row_is_alpha=data.get('row_is_alpha', False),
            col_is_alpha=data.get('col_is_alpha', False),
            slots=copy.deepcopy(data.get('slots') or []),
            material_id=data.get('material'),
        )

    def to_dict(self):
        data = {
            'barcode': self.barcode,
            'num_of_rows': self.num_of_rows,
            'num_of_cols': self.num_of_cols,
            'row_is_alpha': self.row_is_alpha,
            'col_is_alpha': self.col_is_alpha,
            'slots': copy.deepcopy(self.slots),
        }
        if self.material_id is not None:
            data['material'] = self.material_id
        return data


class MaterialRegistry(ABC):

    @abstractmethod
    def create(self, attributes):
        """Create one material from a dict, or one per dict from a list"""

    @abstractmethod
    def destroy(self, material_id):
        pass

    @abstractmethod
    def find(self, material_ids):
        pass

    @abstractmethod
    def get(self, material_id):
        pass

    @abstractmethod
    def update(self, material_id, attributes):
        pass

    @abstractmethod
    def json_schema(self, resource, patch=False):
        """Eve-style schema published for ``materials`` or ``containers``"""


class ContainerRegistry(ABC):

    @abstractmethod
    def find(self, barcode):
        pass

    @abstractmethod
    def find_holding(self, material_id):
        """The container currently holding a material, or None"""

    @abstractmethod
    def create(self, attributes):
        pass

    @abstractmethod
    def destroy(self, container_id):
        pass

    @abstractmethod
    def save(self, container):
        pass


class HttpMaterialRegistry(ServiceClient, MaterialRegistry):
    service_name = 'material registry'
    url_setting = 'MATERIAL_URL'

    def create(self, attributes):
        many = isinstance(attributes, list)
        response = self.http_post('materials', attributes)
        items = response.get('_items', [response]) if many else [response]
        materials = [
            Material(id=item['_id'], attributes=dict(attrs))
            for item, attrs in zip(items, attributes if many else [attributes])
        ]
        logger.info(f"Created {len(materials)} materials in the registry")
        return materials if many else materials[0]

    def destroy(self, material_id):
        self.http_delete(f'materials/{material_id}')
        return True

    def find(self, material_ids):
        material_ids = list(material_ids)
        if not material_ids:
            return []
        where = json.dumps({'_id': {'$in': material_ids}})
        response = self.http_get('materials', params={'where': where, 'max_results': len(material_ids)})
        return [Material.from_dict(item) for item in response.get('_items', [])]

    def get(self, material_id):
        response = self.request('GET', f'materials/{material_id}', allow_404=True)
        return Material.from_dict(response) if response else None

    def update(self, material_id, attributes):
        response = self.http_patch(f'materials/{material_id}', attributes)
        merged = dict(attributes)
        merged['_id'] = response.get('_id', material_id)
        return Material.from_dict(merged)

    def json_schema(self, resource, patch=False):
        suffix = 'json_patch_schema' if patch else 'json_schema'
        return self.http_get(f'{resource}/{suffix}')


class HttpContainerRegistry(ServiceClient, ContainerRegistry):
    service_name = 'container registry'
    url_setting = 'MATERIAL_URL'

    def find(self, barcode):
        response = self.http_get('containers', params={'where': json.dumps({'barcode': barcode})})
        items = response.get('_items', [])
        return Container.from_dict(items[0]) if items else None

    def find_holding(self, material_id):
        where = {'$or': [{'material': material_id}, {'slots.material': material_id}]}
        response = self.http_get('containers', params={'where': json.dumps(where)})
        items = response.get('_items', [])
        return Container.from_dict(items[0]) if items else None

    def create(self, attributes):
        response = self.http_post('containers', attributes)
        data = dict(attributes)
        data['_id'] = response['_id']
        return Container.from_dict(data)

    def destroy(self, container_id):
        self.http_delete(f'containers/{container_id}')
        return True

    def save(self, container):
        payload = {'slots': container.slots}
        if container.material_id is not None or not container.is_slotted:
            payload['material'] = container.material_id
        self.http_patch(f'containers/{container.id}', payload)
        return container
