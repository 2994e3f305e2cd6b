import copy
import re

from django.test import TestCase

from integrations.fakes import fake_clients
from utils.enums import WorkOrderStatusChoices
from work_orders.validator import WorkOrderValidatorService

from .helpers import create_active_order, completion_message, message_schema


class WorkOrderValidatorServiceTest(TestCase):
    """Test cases for completion message validation"""

    def setUp(self):
        self.clients = fake_clients()
        self.work_order, self.material = create_active_order(self.clients)
        self.msg = completion_message(self.work_order.id, self.material.id)
        self.schema = message_schema()

    @property
    def body(self):
        return self.msg['work_order']

    def make_validator(self):
        return WorkOrderValidatorService(
            self.body.get('work_order_id'), self.msg, self.clients, self.schema
        )

    def assert_error(self, pattern, category=None):
        validator = self.make_validator()
        self.assertFalse(validator.validate())
        self.assertTrue(validator.errors)
        self.assertEqual(validator.errors['status'], 422)
        self.assertRegex(validator.errors['msg'], re.compile(pattern, re.IGNORECASE))
        if category:
            self.assertIn(category, validator.errors)
        return validator

    def test_valid_message(self):
        """Test that a consistent message passes"""
        validator = self.make_validator()
        self.assertTrue(validator.validate())
        self.assertEqual(validator.errors, {})

    def test_work_order_not_active(self):
        """Test that only active work orders accept a completion message"""
        self.work_order.status = WorkOrderStatusChoices.COMPLETED
        self.work_order.save()
        self.assert_error(r'work order.*active', 'work_order')

    def test_work_order_does_not_exist(self):
        self.body['work_order_id'] = -1
        self.assert_error(r'work order.*exist', 'work_order')

    def test_unknown_top_level_field(self):
        """Test that the schema error names the unexpected field"""
        self.msg['extra_info'] = 'another extra info'
        self.assert_error(r'extra_info', 'schema')

    def test_unknown_work_order_field(self):
        self.body['priority'] = 'high'
        self.assert_error(r'priority', 'schema')

    def test_schema_failure_skips_content_rules(self):
        """Test that a malformed message reports the schema and work order rules only"""
        self.msg['extra_info'] = 'x'
        self.body['updated_materials'].append(copy.deepcopy(self.body['updated_materials'][0]))
        validator = self.assert_error(r'extra_info', 'schema')
        self.assertNotIn('repeated_materials', validator.errors)

    def test_updated_materials_not_in_work_order(self):
        """Test that updated materials must be exactly the work order's materials"""
        self.body['updated_materials'] = [{'_id': 'someone-elses-material'}]
        self.assert_error(r'materials.*work order', 'materials')

    def test_missing_updated_material(self):
        self.body['updated_materials'] = []
        self.assert_error(r'materials.*work order', 'materials')

    def test_repeated_updated_material(self):
        self.body['updated_materials'].append(copy.deepcopy(self.body['updated_materials'][0]))
        validator = self.assert_error(r'material.*repeated', 'repeated_materials')
        self.assertNotIn('materials', validator.errors)

    def test_repeated_material_reported_with_other_errors(self):
        """Test that a repeated material is reported whatever else is wrong"""
        self.body['updated_materials'].append(copy.deepcopy(self.body['updated_materials'][0]))
        self.body['containers'].append(copy.deepcopy(self.body['containers'][0]))
        self.work_order.status = WorkOrderStatusChoices.QUEUED
        self.work_order.save()
        validator = self.assert_error(r'material.*repeated', 'repeated_materials')
        self.assertIn('barcodes', validator.errors)
        self.assertIn('work_order', validator.errors)

    def test_container_shape_changed(self):
        """Test that a registered container must keep its shape"""
        self.clients.containers.add('XYZ-123', num_of_rows=5, num_of_cols=6, row_is_alpha=True)
        self.assert_error(r'container.*different', 'containers')

    def test_registered_container_with_same_shape(self):
        self.clients.containers.add('XYZ-123', num_of_rows=4, num_of_cols=6, row_is_alpha=True)
        validator = self.make_validator()
        self.assertTrue(validator.validate())
        self.assertEqual(validator.errors, {})

    def test_container_specified_twice(self):
        self.body['containers'].append(copy.deepcopy(self.body['containers'][0]))
        self.assert_error(r'barcode.*unique', 'barcodes')

    def test_repeated_location_without_address(self):
        """Test that two materials bound for the same bare barcode are ambiguous"""
        material = self.body['new_materials'][0]
        del material['container']['address']
        self.body['new_materials'].append(copy.deepcopy(material))
        self.assert_error(r'materials.*location', 'locations')

    def test_repeated_location_with_address(self):
        self.body['new_materials'].append(copy.deepcopy(self.body['new_materials'][0]))
        self.assert_error(r'materials.*location', 'locations')

    def test_two_addresses_in_one_container(self):
        """Test that two materials in different slots of one container pass"""
        second = copy.deepcopy(self.body['new_materials'][0])
        second['container'] = {'barcode': 'XYZ-123', 'address': 'A:2'}
        self.body['new_materials'].append(second)

        validator = self.make_validator()
        self.assertTrue(validator.validate())
        self.assertEqual(validator.errors, {})

    def test_location_with_and_without_address(self):
        second = copy.deepcopy(self.body['new_materials'][0])
        second['container'] = {'barcode': 'XYZ-123'}
        self.body['new_materials'].append(second)
        self.assert_error(r'materials.*location', 'locations')

    def test_location_missing_from_containers(self):
        second = copy.deepcopy(self.body['new_materials'][0])
        second['container'] = {'barcode': 'ABC-XYZ'}
        self.body['new_materials'].append(second)
        self.assert_error(r'locations.*containers', 'missing_containers')

    def test_superfluous_container(self):
        extra = copy.deepcopy(self.body['containers'][0])
        extra['barcode'] = 'ABC-XYZ'
        self.body['containers'].append(extra)
        self.assert_error(r'containers.*locations', 'unused_containers')

    def test_every_failed_rule_is_reported(self):
        self.body['updated_materials'].append(copy.deepcopy(self.body['updated_materials'][0]))
        extra = copy.deepcopy(self.body['containers'][0])
        extra['barcode'] = 'ABC-XYZ'
        self.body['containers'].append(extra)
        validator = self.make_validator()

        self.assertFalse(validator.validate())
        self.assertIn('repeated_materials', validator.errors)
        self.assertIn('unused_containers', validator.errors)
        self.assertRegex(validator.errors['msg'], r'material.*repeated')
        self.assertRegex(validator.errors['msg'], re.compile(r'containers.*locations', re.IGNORECASE))
