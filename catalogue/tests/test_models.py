from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase

from catalogue.models import Process, ProcessModule, ProcessModulePairing, Product, ProductProcess

User = get_user_model()


class ProcessPathTest(TestCase):
    """Test cases for module paths through a process"""

    def setUp(self):
        self.process = Process.objects.create(name='Sequencing', TAT=10)
        self.prep = ProcessModule.objects.create(name='Library prep', process=self.process)
        self.run = ProcessModule.objects.create(name='Sequencing run', process=self.process)
        self.qc = ProcessModule.objects.create(name='Extra QC', process=self.process)

        self.pair(None, self.prep, default=True)
        self.pair(self.prep, self.run, default=True)
        self.pair(self.run, None, default=True)
        self.pair(self.prep, self.qc)
        self.pair(self.qc, self.run)

    def pair(self, source, target, default=False):
        return ProcessModulePairing.objects.create(
            process=self.process, from_step=source, to_step=target, default_path=default
        )

    def test_default_path(self):
        self.assertEqual(self.process.default_path(), [self.prep, self.run])

    def test_valid_paths(self):
        self.assertTrue(self.process.is_valid_path([self.prep.id, self.run.id]))
        self.assertTrue(self.process.is_valid_path([self.prep.id, self.qc.id, self.run.id]))

    def test_invalid_paths(self):
        self.assertFalse(self.process.is_valid_path([]))
        self.assertFalse(self.process.is_valid_path([self.run.id]))
        self.assertFalse(self.process.is_valid_path([self.prep.id, self.qc.id]))
        self.assertFalse(self.process.is_valid_path([self.qc.id, self.run.id]))

    def test_resolve_modules_keeps_path_order(self):
        modules = self.process.resolve_modules([self.prep.id, self.qc.id, self.run.id])
        self.assertEqual(modules, [self.prep, self.qc, self.run])

    def test_resolve_invalid_path(self):
        with self.assertRaises(ValidationError) as raised:
            self.process.resolve_modules([self.run.id, self.prep.id])
        self.assertEqual(raised.exception.messages, ["Invalid module choice for process Sequencing"])

    def test_default_path_without_end(self):
        ProcessModulePairing.objects.filter(from_step=self.run, to_step=None).delete()

        with self.assertRaises(ValidationError):
            self.process.default_path()

    def test_pairing_needs_a_module(self):
        pairing = ProcessModulePairing(process=self.process)
        with self.assertRaises(ValidationError):
            pairing.clean()

    def test_pairing_modules_belong_to_the_process(self):
        other = Process.objects.create(name='Other')
        stranger = ProcessModule.objects.create(name='Stranger', process=other)
        pairing = ProcessModulePairing(process=self.process, from_step=self.prep, to_step=stranger)
        with self.assertRaises(ValidationError):
            pairing.clean()


class ProductTest(TestCase):

    def test_processes_follow_stage_order(self):
        product = Product.objects.create(name='Whole genome')
        late = Process.objects.create(name='Analysis')
        early = Process.objects.create(name='Extraction')
        ProductProcess.objects.create(product=product, process=late, stage=2)
        ProductProcess.objects.create(product=product, process=early, stage=1)

        self.assertEqual(product.processes, [early, late])
        self.assertTrue(product.is_available)


class ProductAPITestCase(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='viewer', email='viewer@example.com', password='testpass123')
        self.client.force_authenticate(user=self.user)
        self.product = Product.objects.create(name='Whole genome')
        process = Process.objects.create(name='Extraction')
        ProductProcess.objects.create(product=self.product, process=process, stage=1)
        self.module = ProcessModule.objects.create(name='Extract DNA', process=process)
        ProcessModulePairing.objects.create(process=process, to_step=self.module, default_path=True)
        ProcessModulePairing.objects.create(process=process, from_step=self.module, default_path=True)

    def test_list_products(self):
        response = self.client.get(reverse('catalogue:product-list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['results'][0]['name'], 'Whole genome')

    def test_product_detail_shows_default_paths(self):
        response = self.client.get(reverse('catalogue:product-detail', kwargs={'pk': self.product.pk}))

        self.assertEqual(response.status_code, 200)
        process = response.data['processes'][0]
        self.assertEqual(process['default_path'], [self.module.id])
        self.assertEqual(process['process_modules'][0]['name'], 'Extract DNA')
