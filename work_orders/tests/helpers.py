import copy

from catalogue.models import Process, ProcessModule, ProcessModulePairing, Product, ProductProcess
from integrations.fakes import CONTAINER_SCHEMA, MATERIAL_SCHEMA
from utils.enums import WorkOrderStatusChoices
from work_orders.models import WorkOrder, WorkPlan
from work_orders.schema import build_message_schema

NEW_MATERIAL = {
    'gender': 'male',
    'donor_id': 'donor-1',
    'phenotype': 'healthy',
    'supplier_name': 'sample-1',
    'common_name': 'Homo Sapiens',
}


def create_product(name='Genome', process_count=2):
    """
    A product whose processes each offer a default module and a second,
    non-default module. Both are complete single-module paths.
    """
    product = Product.objects.create(name=name)
    processes = []
    for stage in range(process_count):
        process = Process.objects.create(name=f"{name} process {stage}", TAT=5)
        ProductProcess.objects.create(product=product, process=process, stage=stage)
        default = ProcessModule.objects.create(name=f"{name} module {stage}", process=process)
        other = ProcessModule.objects.create(name=f"{name} module {stage}B", process=process)
        for module, is_default in ((default, True), (other, False)):
            ProcessModulePairing.objects.create(process=process, to_step=module, default_path=is_default)
            ProcessModulePairing.objects.create(process=process, from_step=module, default_path=is_default)
        processes.append(process)
    return product, processes


def module_ids(process, index=0):
    return [list(process.process_modules.all())[index].id]


def create_active_order(clients, product=None, processes=None):
    """
    A plan with an active first order working on a set of one material,
    and a queued second order.
    """
    if product is None:
        product, processes = create_product()
    material = clients.materials.add({'gender': 'female', 'donor_id': 'donor-0'})
    work_set = clients.sets.add('dispatched', [material.id], locked=True)
    plan = WorkPlan.objects.create(
        owner_email='owner@example.com',
        project_id=18,
        product=product,
        original_set_uuid=work_set.id
    )
    first = WorkOrder.objects.create(
        work_plan=plan,
        process=processes[0],
        order_index=0,
        status=WorkOrderStatusChoices.ACTIVE,
        original_set_uuid=work_set.id,
        set_uuid=work_set.id,
        comment='In the lab'
    )
    WorkOrder.objects.create(work_plan=plan, process=processes[1], order_index=1)
    return first, material


def completion_message(work_order_id, material_id):
    new_material = copy.deepcopy(NEW_MATERIAL)
    new_material['container'] = {'barcode': 'XYZ-123', 'address': 'A:1'}
    return {
        'work_order': {
            'work_order_id': work_order_id,
            'comment': 'Finished',
            'updated_materials': [{'_id': material_id, 'phenotype': 'processed'}],
            'new_materials': [new_material],
            'containers': [{
                'barcode': 'XYZ-123',
                'num_of_rows': 4,
                'num_of_cols': 6,
                'row_is_alpha': True,
                'col_is_alpha': False,
            }],
        }
    }


def message_schema():
    return build_message_schema(MATERIAL_SCHEMA, MATERIAL_SCHEMA, CONTAINER_SCHEMA)
