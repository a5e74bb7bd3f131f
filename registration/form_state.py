"""
Observable form state for the registration form.

Holds the raw field values, the tech field list, the errors of the last
submit and the rendered output. Listeners are told about every change so
the page can re-render. After the first submit every change also
recomputes the errors.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .field_list import TechFieldList
from .models import AvatarFile, ErrorMap, FormInput, ValidationResult
from .validator import ValidationSettings, validate

logger = logging.getLogger(__name__)

SCALAR_FIELDS = ('avatar', 'name', 'email', 'password')


class SubmissionPhase(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    SUCCESS = "success"
    FAILED = "failed"


class FormState:
    """Form values plus the Editing -> Validating -> Success/Failed cycle."""

    def __init__(self, settings: Optional[ValidationSettings] = None):
        self.settings = settings or ValidationSettings()
        self.values: Dict[str, Any] = {name: None if name == 'avatar' else "" for name in SCALAR_FIELDS}
        self.techs = TechFieldList()
        self.errors: ErrorMap = {}
        self.output: str = ""
        self.phase = SubmissionPhase.EDITING
        self.last_outcome: Optional[SubmissionPhase] = None
        self.submit_count = 0
        self._listeners: List[Callable[["FormState", str], None]] = []
        self.techs.subscribe(lambda _techs: self._on_change('techs'))

    def subscribe(self, listener: Callable[["FormState", str], None]) -> Callable[[], None]:
        """
        Register a callback run with (state, event) after every change.
        Events are field names, 'techs', 'errors', 'reset' or 'phase:<name>'.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(self, event)

    def _set_phase(self, phase: SubmissionPhase) -> None:
        logger.debug(f"Submission phase: {self.phase.value} -> {phase.value}")
        self.phase = phase
        self._notify(f"phase:{phase.value}")

    def _on_change(self, event: str) -> None:
        self._notify(event)
        if self.submit_count and self.phase == SubmissionPhase.EDITING:
            self.revalidate()

    def revalidate(self) -> ErrorMap:
        """
        Recompute errors from the current values without submitting.

        Row errors are positional, so this also moves them along with their
        rows after a remove. Phase and output are left alone.
        """
        errors = dict(validate(self.to_form_input(), self.settings).errors)
        if errors != self.errors:
            self.errors = errors
            self._notify('errors')
        return self.errors

    def set_value(self, field_name: str, value: Any) -> None:
        """Set one of avatar, name, email or password."""
        if field_name not in SCALAR_FIELDS:
            raise KeyError(f"Unknown form field: {field_name}")
        if field_name == 'avatar':
            value = AvatarFile.from_upload(value)
        if self.values.get(field_name) == value:
            return
        self.values[field_name] = value
        self._on_change(field_name)

    def get_value(self, field_name: str) -> Any:
        return self.values.get(field_name)

    def error_for(self, path: str) -> Optional[str]:
        return self.errors.get(path)

    def to_form_input(self) -> FormInput:
        return FormInput(
            avatar=self.values['avatar'],
            name=self.values['name'],
            email=self.values['email'],
            password=self.values['password'],
            techs=self.techs.entries,
        )

    def submit(self) -> ValidationResult:
        """
        Validate the current values synchronously.

        On success the output string is replaced and errors are cleared; on
        failure the errors are replaced and values are left untouched.
        Either way the form ends back in EDITING.
        """
        self.submit_count += 1
        self._set_phase(SubmissionPhase.VALIDATING)

        result = validate(self.to_form_input(), self.settings)

        if result.ok:
            self.errors = {}
            self.output = result.output.to_display()
            outcome = SubmissionPhase.SUCCESS
            logger.info(f"Submission #{self.submit_count} succeeded")
        else:
            self.errors = dict(result.errors)
            outcome = SubmissionPhase.FAILED
            logger.info(f"Submission #{self.submit_count} failed: {len(self.errors)} field errors")

        self.last_outcome = outcome
        self._notify('errors')
        self._set_phase(outcome)
        self._set_phase(SubmissionPhase.EDITING)
        return result

    def reset(self) -> None:
        """Clear every value, the tech rows, errors and output."""
        for name in SCALAR_FIELDS:
            self.values[name] = None if name == 'avatar' else ""
        self.errors = {}
        self.output = ""
        self.last_outcome = None
        self.submit_count = 0
        self.techs.reset()
        self._notify('reset')
