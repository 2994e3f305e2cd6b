from utils.enums import WorkOrderStatusChoices

from .base import StepContext
from .containers import CreateContainersStep
from .materials import CreateNewMaterialsStep, RelocateMaterialsStep, UpdateOldMaterialsStep
from .sets import CreateFinishedSetStep
from .work_order import UpdateWorkOrderStep


def build_completion_steps(work_order, msg, clients):
    context = StepContext(work_order=work_order, msg=msg, clients=clients)
    return [
        CreateContainersStep(context),
        CreateNewMaterialsStep(context),
        RelocateMaterialsStep(context),
        UpdateOldMaterialsStep(context),
        CreateFinishedSetStep(context),
        UpdateWorkOrderStep(context, WorkOrderStatusChoices.COMPLETED),
    ]


def build_cancellation_steps(work_order, msg, clients):
    context = StepContext(work_order=work_order, msg=msg, clients=clients)
    return [
        CreateContainersStep(context),
        CreateNewMaterialsStep(context),
        RelocateMaterialsStep(context),
        UpdateOldMaterialsStep(context),
        UpdateWorkOrderStep(context, WorkOrderStatusChoices.CANCELLED),
    ]
