import os

import pandas as pd
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from tqdm import tqdm

from catalogue.models import Product, Process, ProductProcess, ProcessModule, ProcessModulePairing

REQUIRED_COLUMNS = ['Product Name', 'Stage', 'Process Name', 'From Module', 'To Module', 'Default Path']


def _cell(row, column):
    value = row.get(column, '')
    if pd.isna(value):
        return ''
    return str(value).strip()


class Command(BaseCommand):
    help = 'Import products, processes, modules and module pairings from a CSV or Excel file'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            help='Path to CSV/Excel file with one row per module pairing',
            required=True
        )
        parser.add_argument(
            '--replace-pairings',
            action='store_true',
            help='Delete the existing pairings of every imported process first'
        )

    def handle(self, *args, **options):
        file_path = options['file']

        if not os.path.exists(file_path):
            raise CommandError(f'File not found: {file_path}')

        if file_path.lower().endswith(('.xlsx', '.xls')):
            df = pd.read_excel(file_path)
        else:
            df = pd.read_csv(file_path)
        df.columns = df.columns.str.strip()

        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise CommandError(f'Missing columns: {", ".join(missing)}')

        counts = {'products': 0, 'processes': 0, 'modules': 0, 'pairings': 0}
        errors = []

        with transaction.atomic():
            cleared = set()
            for index, row in tqdm(df.iterrows(), total=len(df), desc="Importing catalogue", unit="row"):
                try:
                    self._import_row(row, counts, cleared, options['replace_pairings'])
                except (ValueError, KeyError) as e:
                    errors.append(f'Row {index + 1}: {e}')

            if errors:
                for error in errors:
                    self.stdout.write(self.style.ERROR(error))
                raise CommandError(f'{len(errors)} rows failed, nothing was imported')

        self.stdout.write(
            self.style.SUCCESS(
                f"Imported {counts['products']} products, {counts['processes']} processes, "
                f"{counts['modules']} modules and {counts['pairings']} pairings"
            )
        )

    def _import_row(self, row, counts, cleared, replace_pairings):
        product_name = _cell(row, 'Product Name')
        process_name = _cell(row, 'Process Name')
        if not product_name or not process_name:
            raise ValueError('Product Name and Process Name are required')

        stage = int(float(_cell(row, 'Stage') or 0))
        tat = _cell(row, 'TAT')

        product, created = Product.objects.get_or_create(name=product_name)
        counts['products'] += int(created)

        process, created = Process.objects.get_or_create(
            name=process_name,
            defaults={'TAT': int(float(tat)) if tat else 0}
        )
        counts['processes'] += int(created)

        ProductProcess.objects.update_or_create(
            product=product,
            stage=stage,
            defaults={'process': process}
        )

        if replace_pairings and process.pk not in cleared:
            process.module_pairings.all().delete()
            cleared.add(process.pk)

        from_name = _cell(row, 'From Module')
        to_name = _cell(row, 'To Module')
        if not from_name and not to_name:
            raise ValueError('A pairing needs From Module or To Module')

        modules = []
        for name in (from_name, to_name):
            if not name:
                modules.append(None)
                continue
            module, created = ProcessModule.objects.get_or_create(name=name, process=process)
            counts['modules'] += int(created)
            modules.append(module)

        default_path = _cell(row, 'Default Path').lower() in ('true', 'yes', '1', 'y')
        _, created = ProcessModulePairing.objects.get_or_create(
            process=process,
            from_step=modules[0],
            to_step=modules[1],
            defaults={'default_path': default_path}
        )
        counts['pairings'] += int(created)
