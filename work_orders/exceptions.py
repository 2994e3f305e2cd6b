class WorkOrderError(Exception):
    """Base class for work order lifecycle errors."""


class GuardViolation(WorkOrderError):
    """A lifecycle precondition does not hold; nothing was changed."""


class ExternalLookupFailure(GuardViolation):
    """A referenced project, set, module price or container could not be resolved."""


class StepFailure(WorkOrderError):
    """
    A completion or cancellation step failed to apply.
    Raised after the steps applied before it were compensated.
    """

    def __init__(self, step, cause, compensation_errors=None):
        self.step = step
        self.cause = cause
        self.compensation_errors = list(compensation_errors or [])
        super().__init__(f"{step.name} failed: {cause}")
