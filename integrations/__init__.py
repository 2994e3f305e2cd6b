"""
Clients for the services a work order depends on.

Each collaborator is an abstract interface with an HTTP implementation and an
in-memory double in ``integrations.fakes``. ``get_clients`` builds the bundle
configured in ``WORK_ORDERS_SETTINGS['CLIENT_CLASSES']``.
"""
from dataclasses import dataclass

from django.conf import settings
from django.utils.module_loading import import_string


@dataclass
class Clients:
    materials: object
    containers: object
    sets: object
    projects: object
    billing: object
    dispatch: object
    events: object


def get_clients(**overrides):
    classes = settings.WORK_ORDERS_SETTINGS['CLIENT_CLASSES']
    instances = {}
    for name in Clients.__dataclass_fields__:
        if name in overrides:
            instances[name] = overrides[name]
        else:
            instances[name] = import_string(classes[name])()
    return Clients(**instances)
