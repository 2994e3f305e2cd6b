"""
Reversible steps run when a work order is completed or cancelled
"""
from .base import Step, StepContext
from .builder import build_cancellation_steps, build_completion_steps
from .containers import CreateContainersStep
from .materials import CreateNewMaterialsStep, RelocateMaterialsStep, UpdateOldMaterialsStep
from .sets import CreateFinishedSetStep
from .work_order import UpdateWorkOrderStep

__all__ = [
    'Step',
    'StepContext',
    'CreateContainersStep',
    'CreateNewMaterialsStep',
    'RelocateMaterialsStep',
    'UpdateOldMaterialsStep',
    'CreateFinishedSetStep',
    'UpdateWorkOrderStep',
    'build_completion_steps',
    'build_cancellation_steps',
]
