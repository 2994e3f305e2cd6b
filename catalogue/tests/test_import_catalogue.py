import os
import tempfile
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from catalogue.models import Process, ProcessModule, ProcessModulePairing, Product

HEADER = 'Product Name,Stage,Process Name,TAT,From Module,To Module,Default Path\n'


class ImportCatalogueCommandTest(TestCase):

    def write_csv(self, content):
        handle, path = tempfile.mkstemp(suffix='.csv')
        with os.fdopen(handle, 'w') as csv_file:
            csv_file.write(content)
        self.addCleanup(os.remove, path)
        return path

    def test_imports_rows(self):
        path = self.write_csv(
            HEADER +
            'Genome,1,Extraction,5,,Extract DNA,yes\n'
            'Genome,1,Extraction,5,Extract DNA,,yes\n'
            'Genome,2,Sequencing,10,,Library prep,yes\n'
            'Genome,2,Sequencing,10,Library prep,,yes\n'
        )
        out = StringIO()

        call_command('import_catalogue', file=path, stdout=out)

        product = Product.objects.get(name='Genome')
        self.assertEqual([process.name for process in product.processes], ['Extraction', 'Sequencing'])
        self.assertEqual(Process.objects.get(name='Sequencing').TAT, 10)
        self.assertEqual(ProcessModule.objects.count(), 2)
        self.assertEqual(ProcessModulePairing.objects.count(), 4)
        self.assertEqual([m.name for m in Process.objects.get(name='Extraction').default_path()], ['Extract DNA'])
        self.assertIn('Imported 1 products', out.getvalue())

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('import_catalogue', file='/does/not/exist.csv', stdout=StringIO())

    def test_missing_columns(self):
        path = self.write_csv('Product Name,Stage\nGenome,1\n')

        with self.assertRaises(CommandError) as raised:
            call_command('import_catalogue', file=path, stdout=StringIO())

        self.assertIn('Process Name', str(raised.exception))
        self.assertEqual(Product.objects.count(), 0)

    def test_row_errors_import_nothing(self):
        path = self.write_csv(
            HEADER +
            'Genome,1,Extraction,5,,Extract DNA,yes\n'
            'Genome,2,Sequencing,10,,,yes\n'
        )

        with self.assertRaises(CommandError):
            call_command('import_catalogue', file=path, stdout=StringIO())

        self.assertEqual(Product.objects.count(), 0)
        self.assertEqual(ProcessModulePairing.objects.count(), 0)
