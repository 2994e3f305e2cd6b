import json
from decimal import Decimal
from unittest.mock import Mock

import requests
from django.test import SimpleTestCase

from integrations.billing import HttpBillingService
from integrations.errors import ExternalServiceError
from integrations.http import ServiceClient
from integrations.materials import HttpContainerRegistry
from integrations.projects import HttpProjectDirectory
from integrations.sets import HttpSetService


def response(status_code=200, body=None):
    content = json.dumps(body).encode() if body is not None else b''
    return Mock(status_code=status_code, content=content, text=content.decode(), json=Mock(return_value=body))


def session(*responses):
    mock = Mock()
    mock.headers = {}
    mock.request.side_effect = list(responses)
    return mock


class ExampleClient(ServiceClient):
    service_name = 'example'
    url_setting = 'MATERIAL_URL'


class ServiceClientTest(SimpleTestCase):
    """Test cases for the shared HTTP plumbing"""

    def test_joins_urls_and_returns_json(self):
        http = session(response(body={'ok': True}))
        client = ExampleClient(base_url='http://registry/', session=http)

        self.assertEqual(client.http_get('/materials'), {'ok': True})
        http.request.assert_called_once_with('GET', 'http://registry/materials', timeout=client.timeout)

    def test_empty_body(self):
        client = ExampleClient(base_url='http://registry', session=session(response(204)))
        self.assertEqual(client.http_delete('materials/1'), {})

    def test_error_status_raises(self):
        client = ExampleClient(base_url='http://registry', session=session(response(500, {'error': 'boom'})))

        with self.assertRaises(ExternalServiceError) as raised:
            client.http_get('materials')
        self.assertEqual(raised.exception.status_code, 500)

    def test_allowed_404(self):
        client = ExampleClient(base_url='http://registry', session=session(response(404)))
        self.assertIsNone(client.request('GET', 'materials/1', allow_404=True))

    def test_transport_error_raises(self):
        http = session()
        http.request.side_effect = requests.ConnectionError('refused')
        client = ExampleClient(base_url='http://registry', session=http)

        with self.assertRaises(ExternalServiceError):
            client.http_get('materials')


class RemoteClientsTest(SimpleTestCase):

    def test_set_with_materials(self):
        document = {'data': {
            'id': 's1',
            'attributes': {'name': 'samples', 'locked': True},
            'relationships': {'materials': {'data': [{'id': 'm1'}, {'id': 'm2'}]}},
        }}
        sets = HttpSetService(base_url='http://sets', session=session(response(body=document)))

        found = sets.find_with_materials('s1')

        self.assertTrue(found.locked)
        self.assertEqual(found.material_ids, ['m1', 'm2'])

    def test_missing_project(self):
        projects = HttpProjectDirectory(base_url='http://study', session=session(response(404)))
        self.assertIsNone(projects.find(42))

    def test_project_cost_code(self):
        document = {'data': {'id': 18, 'attributes': {'name': 'Mice', 'cost-code': 'S1234'}}}
        projects = HttpProjectDirectory(base_url='http://study', session=session(response(body=document)))

        self.assertEqual(projects.find(18).cost_code, 'S1234')

    def test_module_price(self):
        billing = HttpBillingService(base_url='http://billing', session=session(response(body={'price': '12.50'})))
        self.assertEqual(billing.cost_for_module('Extract DNA', 'S1234'), Decimal('12.50'))

    def test_uncostable_module(self):
        billing = HttpBillingService(base_url='http://billing', session=session(response(500)))
        self.assertIsNone(billing.cost_for_module('Extract DNA', 'S1234'))

    def test_cost_code_verification(self):
        billing = HttpBillingService(
            base_url='http://billing',
            session=session(response(body={'verified': True}), response(404))
        )

        self.assertTrue(billing.validate_cost_code('S1234'))
        self.assertFalse(billing.validate_cost_code('X999'))
        self.assertFalse(billing.validate_cost_code(''))

    def test_container_holding_a_material(self):
        document = {'_items': [{'_id': 'c1', 'barcode': 'TUBE-1', 'material': 'm1'}]}
        http = session(response(body=document))
        containers = HttpContainerRegistry(base_url='http://registry', session=http)

        holder = containers.find_holding('m1')

        self.assertEqual(holder.barcode, 'TUBE-1')
        where = json.loads(http.request.call_args.kwargs['params']['where'])
        self.assertEqual(where, {'$or': [{'material': 'm1'}, {'slots.material': 'm1'}]})
