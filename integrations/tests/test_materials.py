from django.test import SimpleTestCase

from integrations.materials import Container, Material, _labels


class LabelsTest(SimpleTestCase):

    def test_numeric_labels(self):
        self.assertEqual(_labels(3, False), ['1', '2', '3'])

    def test_alpha_labels_roll_over(self):
        labels = _labels(28, True)
        self.assertEqual(labels[:3], ['A', 'B', 'C'])
        self.assertEqual(labels[25:], ['Z', 'AA', 'AB'])


class ContainerTest(SimpleTestCase):
    """Test cases for container addressing"""

    def setUp(self):
        self.plate = Container(id='p1', barcode='PLATE-1', num_of_rows=2, num_of_cols=3, row_is_alpha=True)

    def test_addresses(self):
        self.assertEqual(self.plate.addresses, ['A:1', 'A:2', 'A:3', 'B:1', 'B:2', 'B:3'])
        self.assertTrue(self.plate.is_slotted)
        self.assertFalse(Container(id='t1', barcode='TUBE-1').is_slotted)

    def test_assign_and_find(self):
        self.plate.assign_to_slot('B:2', 'm1')

        self.assertEqual(self.plate.material_at('B:2'), 'm1')
        self.assertTrue(self.plate.holds('m1'))
        self.assertFalse(self.plate.holds('m2'))
        self.assertEqual(self.plate.next_free_address(), 'A:1')

    def test_reassigning_a_slot_replaces_the_material(self):
        self.plate.assign_to_slot('A:1', 'm1')
        self.plate.assign_to_slot('A:1', 'm2')

        self.assertEqual(len(self.plate.slots), 1)
        self.assertEqual(self.plate.material_at('A:1'), 'm2')

    def test_unknown_address(self):
        with self.assertRaises(ValueError):
            self.plate.assign_to_slot('C:1', 'm1')

    def test_full_plate_has_no_free_address(self):
        for index, address in enumerate(self.plate.addresses):
            self.plate.assign_to_slot(address, f'm{index}')
        self.assertIsNone(self.plate.next_free_address())

    def test_detach(self):
        self.plate.assign_to_slot('A:2', 'm1')
        self.plate.detach('m1')
        self.assertIsNone(self.plate.material_at('A:2'))
        self.assertFalse(self.plate.holds('m1'))
        self.assertEqual(self.plate.slots, [])

    def test_snapshot_and_restore(self):
        snapshot = self.plate.snapshot()
        self.plate.assign_to_slot('A:1', 'm1')

        self.plate.restore(snapshot)

        self.assertEqual(self.plate.slots, [])

    def test_from_dict(self):
        container = Container.from_dict({
            '_id': 'c1',
            'barcode': 'TUBE-9',
            'num_of_rows': 1,
            'num_of_cols': 1,
            'row_is_alpha': False,
            'col_is_alpha': False,
            'material': 'm7',
        })

        self.assertEqual(container.material_id, 'm7')
        self.assertEqual(container.to_dict()['material'], 'm7')
        self.assertEqual(container.shape, (1, 1, False, False))


class MaterialTest(SimpleTestCase):

    def test_from_dict_drops_meta_fields(self):
        material = Material.from_dict({'_id': 'm1', '_etag': 'x', 'available': True, 'gender': 'male'})

        self.assertEqual(material.id, 'm1')
        self.assertEqual(material.attributes, {'available': True, 'gender': 'male'})
        self.assertTrue(material.available)
