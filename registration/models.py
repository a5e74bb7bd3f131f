"""
Data model for the registration form.
Raw form input is kept in plain dataclasses; the validated record is an
immutable Pydantic model that renders itself for display.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Mapping of field path (e.g. "techs[0].title") to a message
ErrorMap = Dict[str, str]


class AvatarFile(BaseModel):
    """Uploaded avatar reference. Only metadata is kept, never the bytes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    size: int = Field(ge=0)
    mime_type: str = Field(default="", serialization_alias="type")

    @classmethod
    def from_upload(cls, upload: Any) -> Optional["AvatarFile"]:
        """
        Build an AvatarFile from a Streamlit UploadedFile (or anything with
        name/size/type attributes).

        Args:
            upload: Uploaded file object, or None when nothing was picked

        Returns:
            AvatarFile, or None if no file was supplied
        """
        if upload is None:
            return None
        if isinstance(upload, AvatarFile):
            return upload

        size = getattr(upload, "size", None)
        if size is None and hasattr(upload, "getvalue"):
            size = len(upload.getvalue())

        return cls(
            name=getattr(upload, "name", "") or "",
            size=int(size or 0),
            mime_type=getattr(upload, "type", "") or "",
        )


@dataclass
class TechEntry:
    """One repeatable technology row. `key` is a rendering identity only."""

    key: str
    title: str = ""
    knowledge: Union[str, int, float, None] = 0

    def to_values(self) -> Dict[str, Any]:
        return {"title": self.title, "knowledge": self.knowledge}


@dataclass
class FormInput:
    """Raw, user-entered form values as collected from the widgets."""

    avatar: Optional[AvatarFile] = None
    name: Optional[str] = ""
    email: Optional[str] = ""
    password: Optional[str] = ""
    techs: List[TechEntry] = field(default_factory=list)


class TechItem(BaseModel):
    """Validated technology entry."""

    model_config = ConfigDict(frozen=True)

    title: str
    knowledge: Union[int, float]


class ValidatedOutput(BaseModel):
    """Record produced only by a successful validation."""

    model_config = ConfigDict(frozen=True)

    avatar: Optional[AvatarFile] = None
    name: str
    email: str
    password: str
    techs: List[TechItem]

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe dictionary of the record."""
        return self.model_dump(mode="json", by_alias=True)

    def to_display(self) -> str:
        """2-space indented JSON dump shown after a successful submit."""
        return json.dumps(self.to_payload(), indent=2, ensure_ascii=False)


@dataclass
class ValidationResult:
    """Outcome of validating a FormInput: either output or errors."""

    output: Optional[ValidatedOutput] = None
    errors: ErrorMap = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.output is not None and not self.errors
