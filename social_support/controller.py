# social_support/controller.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

from .exceptions import WizardStateError
from .form_validation import ValidationReport, validate_record, validate_section
from .gateway import SubmissionGateway, SubmissionResponse
from .schema import TOTAL_STEPS
from .step_definitions import STEPS_BY_ID
from .store import FormStateStore

logger = logging.getLogger(__name__)

class WizardState(Enum):
    STEP_1 = 'step_1'
    STEP_2 = 'step_2'
    STEP_3 = 'step_3'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'

STEP_STATES: dict[int, WizardState] = {
    1: WizardState.STEP_1,
    2: WizardState.STEP_2,
    3: WizardState.STEP_3,
}

@dataclass(frozen=True)
class SubmitOutcome:
    validation: ValidationReport
    # None when validation failed and the gateway was never called
    response: SubmissionResponse | None = None

    @property
    def succeeded(self) -> bool:
        return self.response is not None and self.response.success

# ===================================================================
# 1. PURE NAVIGATION HELPERS
# ===================================================================

def calculate_next_step_id(current_step_id: int, total_steps: int = TOTAL_STEPS) -> int:
    """Calculates the ID of the next step in the sequence."""
    if not 1 <= current_step_id <= total_steps:
        return 1  # Go to start if current step isn't in sequence
    return min(current_step_id + 1, total_steps)  # Stay on the last step

def calculate_prev_step_id(current_step_id: int, total_steps: int = TOTAL_STEPS) -> int:
    """Calculates the ID of the previous step in the sequence."""
    if not 1 <= current_step_id <= total_steps:
        return 1
    return max(current_step_id - 1, 1)

# ===================================================================
# 2. THE CONTROLLER
# ===================================================================

class WizardController:
    """
    Drives one wizard session: gated forward steps, free backward/jump
    navigation, save points and the final submission.
    """

    def __init__(self, store: FormStateStore, gateway: SubmissionGateway) -> None:
        self.store = store
        self.gateway = gateway
        # Overrides the step-derived state while submitting / after success.
        self._phase: WizardState | None = None
        self.current_errors: dict[str, str] = {}
        self.submission_error: str | None = None
        self.application_id: str | None = None
        self.submission_message: str | None = None

    @property
    def state(self) -> WizardState:
        if self._phase is not None:
            return self._phase
        return STEP_STATES[self.store.data.current_step]

    @property
    def is_submitting(self) -> bool:
        return self._phase is WizardState.SUBMITTING

    @property
    def is_last_step(self) -> bool:
        return self.store.data.current_step == TOTAL_STEPS

    def _require_editable(self, action: str) -> None:
        if self._phase is not None:
            raise WizardStateError(f"Cannot {action} while the wizard is {self._phase.value}")

    def resume(self) -> bool:
        """Restores saved progress at the start of a session."""
        self._require_editable('resume')
        return self.store.restore()

    # --- Navigation ---

    def next_step(self) -> ValidationReport:
        """Validates the current step; on success marks it completed, saves and moves on."""
        self._require_editable('advance')
        current_step_id = self.store.data.current_step
        section = STEPS_BY_ID[current_step_id]['section']

        report = validate_section(section, self.store.data.get_section(section))
        self.current_errors = report.field_errors
        if not report.valid:
            logger.info(f"Step {current_step_id} has {len(report.errors)} validation error(s).")
            return report

        self.store.mark_step_completed(current_step_id)
        self.store.set_current_step(calculate_next_step_id(current_step_id))
        self.store.save_progress()
        return report

    def prev_step(self) -> None:
        self._require_editable('go back')
        self.store.set_current_step(calculate_prev_step_id(self.store.data.current_step))
        self.current_errors = {}

    def go_to_step(self, step_id: int) -> None:
        """Step-indicator navigation: any step, no validation."""
        self._require_editable('navigate')
        self.store.set_current_step(step_id)
        self.current_errors = {}

    def save_progress(self) -> bool:
        """Persists without changing state; allowed while a submission is pending."""
        if self._phase is WizardState.SUCCEEDED:
            raise WizardStateError("Cannot save after the application was submitted")
        return self.store.save_progress()

    def restart(self) -> None:
        """Back to step 1 with an empty record; allowed from any state."""
        self.store.reset_all()
        self._phase = None
        self.current_errors = {}
        self.submission_error = None
        self.application_id = None
        self.submission_message = None

    # --- Submission ---

    async def submit(self) -> SubmitOutcome:
        if self._phase is WizardState.SUBMITTING:
            raise WizardStateError("A submission is already in progress")
        self._require_editable('submit')
        if not self.is_last_step:
            raise WizardStateError(f"Submission is only possible from step {TOTAL_STEPS}")

        report = validate_record(self.store.data)
        self.current_errors = report.field_errors
        self.submission_error = None
        if not report.valid:
            logger.info(f"Submission blocked by {len(report.errors)} validation error(s).")
            return SubmitOutcome(validation=report)

        self.store.mark_step_completed(TOTAL_STEPS)
        self._phase = WizardState.SUBMITTING
        try:
            response = await self.gateway.submit(self.store.data)
            if response.success:
                self.application_id = response.application_id
                self.submission_message = response.message
                self.store.reset_all()
                self._phase = WizardState.SUCCEEDED
                logger.info(f"Application submitted: {response.application_id}")
            else:
                self.submission_error = response.error or response.message
                logger.warning(f"Application submission failed: {self.submission_error}")
        finally:
            if self._phase is WizardState.SUBMITTING:
                self._phase = None
        return SubmitOutcome(validation=report, response=response)
