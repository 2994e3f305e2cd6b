"""
Completion message schema.

The material registry publishes Eve resource schemas. They are converted to
Draft 7 JSON Schema and assembled into the schema of a completion message,
which is cached under a versioned key until ``invalidate`` is called.
"""
import copy
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

DRAFT7 = 'http://json-schema.org/draft-07/schema#'

EVE_TYPES = {
    'string': 'string',
    'uuid': 'string',
    'objectid': 'string',
    'date': 'string',
    'datetime': 'string',
    'integer': 'integer',
    'float': 'number',
    'number': 'number',
    'boolean': 'boolean',
    'list': 'array',
    'dict': 'object',
}

KEYWORDS = {
    'min': 'minimum',
    'max': 'maximum',
    'minlength': 'minLength',
    'maxlength': 'maxLength',
    'allowed': 'enum',
    'enum': 'enum',
    'format': 'format',
    'regex': 'pattern',
}


def convert_field(definition):
    """Convert one Eve field definition to a JSON Schema fragment"""
    converted = {}
    eve_type = definition.get('type')
    if eve_type in EVE_TYPES:
        converted['type'] = EVE_TYPES[eve_type]
    for key, target in KEYWORDS.items():
        if key in definition:
            converted[target] = copy.deepcopy(definition[key])

    inner = definition.get('schema')
    if eve_type == 'list' and isinstance(inner, dict):
        converted['items'] = convert_field(inner)
    elif eve_type == 'dict' and isinstance(inner, dict):
        converted.update(convert_resource({'properties': inner}))

    if definition.get('nullable') and 'type' in converted:
        converted['type'] = [converted['type'], 'null']
    return converted


def convert_resource(eve_schema, keep_required=True):
    """
    Convert an Eve resource schema (``properties`` plus optional ``required``
    list, or per-field ``required: true``) to an object schema.
    """
    properties = {}
    required = list(eve_schema.get('required') or []) if keep_required else []
    for name, definition in (eve_schema.get('properties') or {}).items():
        properties[name] = convert_field(definition)
        if keep_required and definition.get('required') is True and name not in required:
            required.append(name)

    converted = {'type': 'object', 'properties': properties}
    if required:
        converted['required'] = required
    return converted


CONTAINER_REFERENCE = {
    'type': 'object',
    'properties': {
        'barcode': {'type': 'string', 'minLength': 1},
        'address': {'type': 'string'},
    },
    'required': ['barcode'],
    'additionalProperties': False,
}


def build_message_schema(material_schema, material_patch_schema, container_schema):
    new_material = convert_resource(material_schema)
    new_material['properties']['container'] = copy.deepcopy(CONTAINER_REFERENCE)

    updated_material = convert_resource(material_patch_schema, keep_required=False)
    updated_material['properties']['_id'] = {'type': 'string', 'minLength': 1}
    updated_material['properties']['container'] = copy.deepcopy(CONTAINER_REFERENCE)
    updated_material['required'] = ['_id']

    container = convert_resource(container_schema)
    container['properties'].setdefault('barcode', {'type': 'string'})
    container['required'] = sorted(set(container.get('required', [])) | {'barcode'})

    return {
        '$schema': DRAFT7,
        'type': 'object',
        'additionalProperties': False,
        'required': ['work_order'],
        'properties': {
            'work_order': {
                'type': 'object',
                'additionalProperties': False,
                'required': ['work_order_id', 'updated_materials', 'new_materials', 'containers'],
                'properties': {
                    'work_order_id': {'type': 'integer'},
                    'comment': {'type': ['string', 'null']},
                    'updated_materials': {'type': 'array', 'items': updated_material},
                    'new_materials': {'type': 'array', 'items': new_material},
                    'containers': {'type': 'array', 'items': container},
                },
            },
        },
    }


class CompletionSchemaProvider:
    """
    Fetches the registry schemas once and serves the assembled message schema
    from the Django cache.
    """

    def __init__(self, materials):
        self.materials = materials
        config = settings.WORK_ORDERS_SETTINGS
        self.timeout = config.get('SCHEMA_CACHE_TIMEOUT', 3600)
        self.version = config.get('SCHEMA_VERSION', '1')

    @property
    def cache_key(self):
        return f"work_orders:completion_schema:v{self.version}"

    def get(self):
        schema = cache.get(self.cache_key)
        if schema is None:
            schema = self.fetch()
            cache.set(self.cache_key, schema, self.timeout)
        return schema

    def fetch(self):
        logger.info("Fetching material and container schemas from the registry")
        return build_message_schema(
            self.materials.json_schema('materials'),
            self.materials.json_schema('materials', patch=True),
            self.materials.json_schema('containers'),
        )

    def invalidate(self):
        cache.delete(self.cache_key)
