"""
Set service client - JSON API resources under ``sets``
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .http import ServiceClient

logger = logging.getLogger(__name__)


@dataclass
class SetRecord:
    id: str
    name: str = ''
    locked: bool = False
    material_ids: list = field(default_factory=list)

    @property
    def is_empty(self):
        return not self.material_ids


class SetService(ABC):

    @abstractmethod
    def find(self, set_id):
        pass

    @abstractmethod
    def find_with_materials(self, set_id):
        pass

    @abstractmethod
    def lock_clone(self, set_id):
        """Clone the set, lock the clone and return its id"""

    @abstractmethod
    def create(self, name):
        pass

    @abstractmethod
    def add_materials(self, set_id, material_ids):
        pass

    @abstractmethod
    def lock(self, set_id):
        pass

    @abstractmethod
    def destroy(self, set_id):
        pass


def _set_from_document(document):
    data = document['data']
    attributes = data.get('attributes', {})
    materials = data.get('relationships', {}).get('materials', {}).get('data') or []
    return SetRecord(
        id=data['id'],
        name=attributes.get('name', ''),
        locked=attributes.get('locked', False),
        material_ids=[item['id'] for item in materials],
    )


class HttpSetService(ServiceClient, SetService):
    service_name = 'set service'
    url_setting = 'SET_URL'

    def find(self, set_id):
        document = self.request('GET', f'sets/{set_id}', allow_404=True)
        return _set_from_document(document) if document else None

    def find_with_materials(self, set_id):
        document = self.request('GET', f'sets/{set_id}', allow_404=True, params={'include': 'materials'})
        return _set_from_document(document) if document else None

    def lock_clone(self, set_id):
        original = self.find(set_id)
        name = f"{original.name if original else set_id} locked clone"
        document = self.http_post(f'sets/{set_id}/clone', {'data': {'attributes': {'name': name}}})
        clone_id = document['data']['id']
        self.lock(clone_id)
        logger.info(f"Cloned set {set_id} into locked set {clone_id}")
        return clone_id

    def create(self, name):
        document = self.http_post('sets', {'data': {'type': 'sets', 'attributes': {'name': name}}})
        return _set_from_document(document)

    def add_materials(self, set_id, material_ids):
        payload = {'data': [{'type': 'materials', 'id': material_id} for material_id in material_ids]}
        self.http_post(f'sets/{set_id}/relationships/materials', payload)

    def lock(self, set_id):
        payload = {'data': {'type': 'sets', 'id': set_id, 'attributes': {'locked': True}}}
        self.http_patch(f'sets/{set_id}', payload)

    def destroy(self, set_id):
        self.http_delete(f'sets/{set_id}')
        return True
