"""
Validation and transformation rules for the registration form.

Each field maps to an ordered list of rules. A rule is a predicate, the key
of the message reported when the predicate fails, and an optional transform
applied to the value once the predicate passes. Rules of one field stop at
the first failure; fields are evaluated independently so every failing field
path is reported in a single pass.
"""

import logging
import math
import mimetypes
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .config_loader import DEFAULT_MESSAGES, MAX_AVATAR_BYTES
from .models import (
    AvatarFile,
    ErrorMap,
    FormInput,
    TechEntry,
    TechItem,
    ValidatedOutput,
    ValidationResult,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE | re.ASCII,
)


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class ValidationSettings:
    """Limits and message texts used by the rules."""

    max_avatar_bytes: int = MAX_AVATAR_BYTES
    min_password_length: int = 6
    min_techs: int = 2
    knowledge_min: float = 1
    knowledge_max: float = 100
    avatar_mime_prefix: str = "image/"
    messages: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ValidationSettings":
        """
        Build settings from the loaded application configuration.

        Args:
            config: Configuration dictionary (see config_loader.get_default_config)

        Returns:
            ValidationSettings instance
        """
        limits = config.get('validation', {}) or {}
        messages = dict(DEFAULT_MESSAGES)
        messages.update(config.get('messages', {}) or {})

        return cls(
            max_avatar_bytes=int(limits.get('max_avatar_bytes', MAX_AVATAR_BYTES)),
            min_password_length=int(limits.get('min_password_length', 6)),
            min_techs=int(limits.get('min_techs', 2)),
            knowledge_min=float(limits.get('knowledge_min', 1)),
            knowledge_max=float(limits.get('knowledge_max', 100)),
            avatar_mime_prefix=str(limits.get('avatar_mime_prefix', 'image/')),
            messages=messages,
        )

    def message(self, key: str) -> str:
        """Resolve a message key, filling in the configured limits."""
        template = self.messages.get(key) or DEFAULT_MESSAGES.get(key, key)
        try:
            return template.format(
                min_length=self.min_password_length,
                min_techs=self.min_techs,
                knowledge_min=_format_number(self.knowledge_min),
                knowledge_max=_format_number(self.knowledge_max),
                max_avatar_mb=_format_number(self.max_avatar_bytes / (1024 * 1024)),
            )
        except (KeyError, IndexError, ValueError):
            logger.warning(f"Message template for '{key}' has unknown placeholders")
            return template


@dataclass(frozen=True)
class Rule:
    check: Callable[[Any, ValidationSettings], bool]
    message_key: str
    transform: Optional[Callable[[Any], Any]] = None


# Transforms

def capitalize_words(value: str) -> str:
    """Uppercase the first character of every whitespace-separated word."""
    return " ".join(word[0].upper() + word[1:] for word in value.split())


def normalize_email(value: str) -> str:
    return value.strip().lower()


def coerce_number(value: Any) -> Union[int, float]:
    """
    Coerce raw numeric input to a number.

    Empty input counts as 0, like an empty numeric widget. Integral values
    come back as int.

    Raises:
        ValueError: If the value is not a finite number
        TypeError: If the value has an unsupported type
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")

    if value is None:
        number = 0
    elif isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        number = float(text) if text else 0
    else:
        raise TypeError(f"unsupported type: {type(value).__name__}")

    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            raise ValueError("number must be finite")
        if number.is_integer():
            return int(number)
    return number


def _strip(value: str) -> str:
    return value.strip()


# Predicates

def _is_present(value: Any, settings: ValidationSettings) -> bool:
    return value is not None


def _is_not_blank(value: Any, settings: ValidationSettings) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_not_empty(value: Any, settings: ValidationSettings) -> bool:
    return isinstance(value, str) and value != ""


def _is_email(value: str, settings: ValidationSettings) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def _has_password_length(value: str, settings: ValidationSettings) -> bool:
    return len(value) >= settings.min_password_length


def _is_image(avatar: AvatarFile, settings: ValidationSettings) -> bool:
    mime_type = avatar.mime_type
    if not mime_type:
        mime_type, _ = mimetypes.guess_type(avatar.name)
    return bool(mime_type) and mime_type.startswith(settings.avatar_mime_prefix)


def _within_avatar_size(avatar: AvatarFile, settings: ValidationSettings) -> bool:
    return avatar.size <= settings.max_avatar_bytes


def _is_number(value: Any, settings: ValidationSettings) -> bool:
    try:
        coerce_number(value)
    except (ValueError, TypeError):
        return False
    return True


def _at_least_min(value: Union[int, float], settings: ValidationSettings) -> bool:
    return value >= settings.knowledge_min


def _at_most_max(value: Union[int, float], settings: ValidationSettings) -> bool:
    return value <= settings.knowledge_max


FIELD_RULES: Dict[str, List[Rule]] = {
    'avatar': [
        Rule(_is_present, 'avatar_required', AvatarFile.from_upload),
        Rule(_is_image, 'avatar_type'),
        Rule(_within_avatar_size, 'avatar_size'),
    ],
    'name': [
        Rule(_is_not_blank, 'name_required', capitalize_words),
    ],
    'email': [
        Rule(_is_not_blank, 'email_required', _strip),
        Rule(_is_email, 'email_format', normalize_email),
    ],
    'password': [
        Rule(_is_not_empty, 'password_required'),
        Rule(_has_password_length, 'password_length'),
    ],
}

TECH_RULES: Dict[str, List[Rule]] = {
    'title': [
        Rule(_is_not_blank, 'tech_title_required', _strip),
    ],
    'knowledge': [
        Rule(_is_number, 'tech_knowledge_number', coerce_number),
        Rule(_at_least_min, 'tech_knowledge_min'),
        Rule(_at_most_max, 'tech_knowledge_max'),
    ],
}


def apply_rules(value: Any, rules: List[Rule], settings: ValidationSettings) -> Tuple[Any, Optional[str]]:
    """
    Run a field's rules in order.

    Args:
        value: Raw field value
        rules: Ordered rules for the field
        settings: Validation settings

    Returns:
        Tuple of (transformed value, None) on success or (None, message)
        for the first failing rule
    """
    for rule in rules:
        if not rule.check(value, settings):
            return None, settings.message(rule.message_key)
        if rule.transform is not None:
            value = rule.transform(value)
    return value, None


def _entry_value(entry: Any, prop: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(prop)
    return getattr(entry, prop, None)


def tech_path(index: int, prop: Optional[str] = None) -> str:
    """Field path of a tech entry, e.g. techs[1].knowledge."""
    path = f"techs[{index}]"
    return f"{path}.{prop}" if prop else path


def validate(raw: FormInput, settings: Optional[ValidationSettings] = None) -> ValidationResult:
    """
    Validate and transform raw form input.

    Args:
        raw: Raw form values
        settings: Limits and messages (defaults when omitted)

    Returns:
        ValidationResult holding either the ValidatedOutput or the error map
    """
    if settings is None:
        settings = ValidationSettings()

    errors: ErrorMap = {}
    values: Dict[str, Any] = {}

    for field_name, rules in FIELD_RULES.items():
        value, message = apply_rules(getattr(raw, field_name, None), rules, settings)
        if message:
            errors[field_name] = message
        else:
            values[field_name] = value

    techs = list(raw.techs or [])
    if len(techs) < settings.min_techs:
        errors['techs'] = settings.message('techs_min')

    tech_items = []
    for index, entry in enumerate(techs):
        item = {}
        for prop, rules in TECH_RULES.items():
            value, message = apply_rules(_entry_value(entry, prop), rules, settings)
            if message:
                errors[tech_path(index, prop)] = message
            else:
                item[prop] = value
        tech_items.append(item)

    if errors:
        logger.info(f"Validation failed with {len(errors)} errors: {sorted(errors)}")
        return ValidationResult(errors=errors)

    output = ValidatedOutput(
        avatar=values['avatar'],
        name=values['name'],
        email=values['email'],
        password=values['password'],
        techs=[TechItem(**item) for item in tech_items],
    )
    logger.info(f"Validation succeeded with {len(tech_items)} techs")
    return ValidationResult(output=output)


def build_form_input(data: Dict[str, Any]) -> FormInput:
    """
    Build a FormInput from a plain dictionary.

    Tech entries may be dicts or TechEntry instances; dicts get their field
    path as key.
    """
    techs = []
    for index, entry in enumerate(data.get('techs') or []):
        if isinstance(entry, TechEntry):
            techs.append(entry)
        else:
            techs.append(TechEntry(
                key=tech_path(index),
                title=_entry_value(entry, 'title'),
                knowledge=_entry_value(entry, 'knowledge'),
            ))

    return FormInput(
        avatar=AvatarFile.from_upload(data.get('avatar')),
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        techs=techs,
    )


def validate_data(data: Dict[str, Any], settings: Optional[ValidationSettings] = None) -> ValidationResult:
    """Validate a plain dictionary of form values."""
    return validate(build_form_input(data), settings)
