from abc import ABC, abstractmethod
from dataclasses import dataclass

from .http import ServiceClient


@dataclass
class Project:
    id: int
    name: str = ''
    cost_code: str = None


class ProjectDirectory(ABC):

    @abstractmethod
    def find(self, project_id):
        """Return the Project or None when it does not exist"""


class HttpProjectDirectory(ServiceClient, ProjectDirectory):
    service_name = 'project directory'
    url_setting = 'STUDY_URL'

    def find(self, project_id):
        document = self.request('GET', f'nodes/{project_id}', allow_404=True)
        if not document:
            return None
        data = document['data']
        attributes = data.get('attributes', {})
        return Project(
            id=data['id'],
            name=attributes.get('name', ''),
            cost_code=attributes.get('cost-code') or attributes.get('cost_code'),
        )
