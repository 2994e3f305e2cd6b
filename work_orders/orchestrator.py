"""
Runs an ordered list of steps, compensating the applied ones when a step fails.

Compensation is in-process and best effort: a crash in the middle of a run
leaves whatever the applied steps did in the external services.
"""
import logging

from .exceptions import StepFailure

logger = logging.getLogger(__name__)


class StepOrchestrator:

    def __init__(self):
        self.applied = []

    def run(self, steps):
        self.applied = []
        for step in steps:
            try:
                logger.debug(f"Applying {step.name} ({step!r})")
                step.apply()
            except Exception as e:
                logger.warning(f"Step {step.name} failed: {e}")
                compensation_errors = self.compensate()
                raise StepFailure(step, e, compensation_errors) from e
            self.applied.append(step)
        logger.info(f"Applied {len(self.applied)} steps")
        return True

    def compensate(self):
        errors = []
        for step in reversed(self.applied):
            try:
                logger.info(f"Compensating {step.name}")
                step.compensate()
            except Exception as e:
                logger.error(f"Compensation of {step.name} failed: {e}", exc_info=True)
                errors.append((step, e))
        self.applied = []
        return errors
