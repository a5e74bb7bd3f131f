"""
Form data collection for the registration page.
Copies the current widget values from session state into the FormState.
"""

import streamlit as st
import logging
from typing import Any, Dict

from .form_state import FormState, SCALAR_FIELDS

logger = logging.getLogger(__name__)


def field_key(field_name: str, form_version: int) -> str:
    """Session key of a top-level field widget."""
    return f"field_{field_name}_v{form_version}"


def tech_key(entry_key: str, prop: str, form_version: int) -> str:
    """Session key of a tech row widget; bound to the entry key, not its position."""
    return f"tech_{entry_key}_{prop}_v{form_version}"


def collect_form_values(state: FormState) -> Dict[str, Any]:
    """
    Collect current widget values from session state into the form state.

    SIMPLE RULE: every widget stores its value under a versioned key. Keys
    that are missing (widget not rendered yet) leave the state untouched.

    Args:
        state: Form state to update

    Returns:
        Dictionary of the collected raw values
    """
    form_version = st.session_state.get('form_version', 0)
    collected: Dict[str, Any] = {}

    for field_name in SCALAR_FIELDS:
        key = field_key(field_name, form_version)
        if key not in st.session_state:
            logger.debug(f"Missing widget value for: {field_name}")
            continue

        value = st.session_state[key]
        if field_name != 'avatar' and value is not None and not isinstance(value, str):
            logger.warning(f"Field {field_name} has non-text value: {type(value)}")
            value = str(value)

        state.set_value(field_name, value)
        collected[field_name] = state.get_value(field_name)

    techs = []
    for index, entry in enumerate(state.techs):
        changes = {}
        for prop in ('title', 'knowledge'):
            key = tech_key(entry.key, prop, form_version)
            if key in st.session_state:
                changes[prop] = st.session_state[key]
        if changes and changes != {prop: getattr(entry, prop) for prop in changes}:
            state.techs.update(index, **changes)
        techs.append(state.techs[index].to_values())

    collected['techs'] = techs
    logger.debug(f"Collected {len(collected)} fields, {len(techs)} techs")
    return collected
