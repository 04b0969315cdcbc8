"""
Linear multi-step wizard controller.

The controller only owns "which step is active" and progression gating.
Field values belong to the caller (see apps.core.session for the session
backed store and apps.core.wizard_views for the form-driven runner).

Public API:
  Step(id, title, description, template)
  Wizard(title, description, steps, on_submit, on_cancel, can_proceed, ...)
    .go_next()      advance one step if the current step can proceed
    .go_previous()  step back; on the first step this cancels instead
    .cancel()       explicit cancel, from any step
    .submit()       run the submit callback (last step only)
"""
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class WizardStateError(Exception):
    """Raised when an action is not allowed from the current step."""
    pass


@dataclass(frozen=True)
class Step:
    id: str
    title: str
    description: str = ''
    template: str = ''


def _always(step_id: str) -> bool:
    return True


def _noop():
    return None


class Wizard:

    def __init__(self, title: str, description: str, steps, on_submit=None,
                 on_cancel=None, can_proceed=None, current_index: int = 0,
                 is_submitting: bool = False):
        if not steps:
            raise ValueError('A wizard needs at least one step.')
        self.title = title
        self.description = description
        self.steps = tuple(steps)
        self.on_submit = on_submit or _noop
        self.on_cancel = on_cancel or _noop
        self.can_proceed = can_proceed or _always
        self.is_submitting = is_submitting
        # Out-of-range indexes (stale session, edited step list) snap into range
        self.current_index = min(max(int(current_index), 0), len(self.steps) - 1)

    # ── Position ──────────────────────────────────────────────────────────────

    @property
    def current_step(self) -> Step:
        return self.steps[self.current_index]

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == len(self.steps) - 1

    @property
    def progress(self) -> int:
        """Completion percentage, counting the current step as reached."""
        return round((self.current_index + 1) / len(self.steps) * 100)

    @property
    def current_can_proceed(self) -> bool:
        return bool(self.can_proceed(self.current_step.id))

    def step_states(self) -> list:
        """[(step, 'done' | 'current' | 'pending'), ...] for the step indicator."""
        states = []
        for index, step in enumerate(self.steps):
            if index < self.current_index:
                state = 'done'
            elif index == self.current_index:
                state = 'current'
            else:
                state = 'pending'
            states.append((step, state))
        return states

    def index_of(self, step_id: str) -> int:
        for index, step in enumerate(self.steps):
            if step.id == step_id:
                return index
        raise KeyError(step_id)

    # ── Actions ───────────────────────────────────────────────────────────────

    def go_next(self) -> bool:
        """Advance one step. Returns False (and stays put) when blocked."""
        if self.is_last or self.is_submitting:
            return False
        if not self.current_can_proceed:
            return False
        self.current_index += 1
        return True

    def go_previous(self) -> bool:
        """
        Step back one step. On the first step there is nothing to go back
        to, so the cancel callback runs instead and False is returned.
        """
        if self.is_submitting:
            return False
        if self.is_first:
            self.on_cancel()
            return False
        self.current_index -= 1
        return True

    def cancel(self):
        if self.is_submitting:
            return None
        return self.on_cancel()

    def submit(self):
        """
        Invoke the submit callback from the last step.
        Exceptions raised by the callback are not caught here.
        """
        if not self.is_last:
            raise WizardStateError(
                f'Cannot submit from step "{self.current_step.id}"; '
                f'submission is only possible from the last step.'
            )
        if self.is_submitting:
            raise WizardStateError('A submission is already in progress.')
        if not self.current_can_proceed:
            raise WizardStateError(f'Step "{self.current_step.id}" is not complete.')

        self.is_submitting = True
        try:
            logger.debug('Wizard "%s" submitting', self.title)
            return self.on_submit()
        finally:
            self.is_submitting = False
