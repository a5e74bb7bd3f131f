"""
Streamlit rendering of the registration form.

Widgets are keyed by field name (top level) or by tech entry key (rows), so
removing a row never shifts the values of the rows after it. Buttons act
through on_click callbacks, which run before the page re-renders.
"""

import streamlit as st
import logging
from typing import List, Optional

from .error_handler import ErrorHandler, ErrorType
from .exceptions import FieldListError
from .form_data_collector import collect_form_values, field_key, tech_key
from .form_state import FormState
from .session_manager import SessionManager
from .ui_feedback import Notify

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS: List[str] = ["png", "jpg", "jpeg", "gif", "webp"]


def _render_field_error(state: FormState, path: str) -> None:
    message = state.error_for(path)
    if message:
        st.error(message)


def on_add_tech() -> None:
    """Append an empty tech row."""
    state = SessionManager.get_form_state()
    collect_form_values(state)
    entry = state.techs.append(title="", knowledge=0)
    logger.debug(f"Added tech row {entry.key}")


def on_remove_tech(entry_key: str) -> None:
    """Remove the tech row with the given key."""
    state = SessionManager.get_form_state()
    collect_form_values(state)
    try:
        state.techs.remove(state.techs.index_of(entry_key))
    except FieldListError as e:
        ErrorHandler.handle_error(e, f"removing tech row {entry_key}", ErrorType.FORM_STATE)
        return

    version = SessionManager.get_form_version()
    for prop in ('title', 'knowledge'):
        st.session_state.pop(tech_key(entry_key, prop, version), None)


def on_submit() -> None:
    """Collect the widgets and run the submission."""
    state = SessionManager.get_form_state()
    collect_form_values(state)
    result = state.submit()
    SessionManager.update_activity()

    if result.ok:
        Notify.success("User data is valid")
    else:
        Notify.error(f"Please fix {len(result.errors)} field(s)")


def _seed_widget(key: str, value: object) -> None:
    if key not in st.session_state:
        st.session_state[key] = value


def render_tech_rows(state: FormState, form_version: int) -> None:
    """Render the technologies group: header with add button, one row per entry."""
    header, add_col = st.columns([4, 1])
    with header:
        st.markdown("**Technologies**")
    with add_col:
        st.button("Add", key=f"add_tech_v{form_version}", on_click=on_add_tech)

    for index, entry in enumerate(state.techs):
        title_col, knowledge_col, remove_col = st.columns([3, 1, 1])

        title_key = tech_key(entry.key, 'title', form_version)
        knowledge_key = tech_key(entry.key, 'knowledge', form_version)
        _seed_widget(title_key, entry.title or "")
        _seed_widget(knowledge_key, "" if entry.knowledge is None else str(entry.knowledge))

        with title_col:
            st.text_input("Title", key=title_key, label_visibility="collapsed", placeholder="Technology")
            _render_field_error(state, f"techs[{index}].title")
        with knowledge_col:
            st.text_input("Knowledge", key=knowledge_key, label_visibility="collapsed", placeholder="1-100")
            _render_field_error(state, f"techs[{index}].knowledge")
        with remove_col:
            st.button(
                "Remove",
                key=f"remove_{entry.key}_v{form_version}",
                on_click=on_remove_tech,
                args=(entry.key,),
            )

    _render_field_error(state, 'techs')


def render_registration_form(state: Optional[FormState] = None) -> FormState:
    """
    Render all inputs with their inline errors, the submit button and the
    output of the last successful submission.

    Returns:
        The form state that was rendered
    """
    if state is None:
        state = SessionManager.get_form_state()
    form_version = SessionManager.get_form_version()

    st.file_uploader("Avatar", type=AVATAR_EXTENSIONS, key=field_key('avatar', form_version))
    _render_field_error(state, 'avatar')

    st.text_input("Name", key=field_key('name', form_version))
    _render_field_error(state, 'name')

    st.text_input("E-mail", key=field_key('email', form_version))
    _render_field_error(state, 'email')

    st.text_input("Password", type="password", key=field_key('password', form_version))
    _render_field_error(state, 'password')

    render_tech_rows(state, form_version)

    submit_col, reset_col = st.columns([1, 1])
    with submit_col:
        st.button("Save", type="primary", key=f"submit_v{form_version}", on_click=on_submit)
    with reset_col:
        st.button("Reset", key=f"reset_v{form_version}", on_click=SessionManager.reset_form)

    render_output(state)
    return state


def render_output(state: FormState) -> None:
    """Show the JSON dump of the last validated record, if any."""
    if state.output:
        st.code(state.output, language="json")
