"""
Unit tests for the form data model.
"""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from registration.models import AvatarFile, TechEntry, TechItem, ValidatedOutput, ValidationResult


class TestAvatarFile:
    """AvatarFile construction from uploads."""

    def test_from_upload_none(self):
        assert AvatarFile.from_upload(None) is None

    def test_from_upload_attributes(self):
        avatar = AvatarFile.from_upload(SimpleNamespace(name="a.png", size=12, type="image/png"))

        assert avatar == AvatarFile(name="a.png", size=12, mime_type="image/png")

    def test_from_upload_measures_bytes_without_size(self):
        upload = SimpleNamespace(name="a.png", type="image/png", getvalue=lambda: b"x" * 30)

        assert AvatarFile.from_upload(upload).size == 30

    def test_from_upload_passes_avatar_through(self):
        avatar = AvatarFile(name="a.png", size=1)

        assert AvatarFile.from_upload(avatar) is avatar

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            AvatarFile(name="a.png", size=-1)


class TestValidatedOutput:
    """Serialization of the validated record."""

    def test_payload_without_avatar(self):
        output = ValidatedOutput(
            name="Ana",
            email="ana@example.com",
            password="secret1",
            techs=[TechItem(title="React", knowledge=80), TechItem(title="Go", knowledge=12.5)],
        )

        assert output.to_payload() == {
            "avatar": None,
            "name": "Ana",
            "email": "ana@example.com",
            "password": "secret1",
            "techs": [{"title": "React", "knowledge": 80}, {"title": "Go", "knowledge": 12.5}],
        }
        assert output.to_display().startswith('{\n  "avatar": null,\n  "name": "Ana"')

    def test_display_keeps_non_ascii(self):
        output = ValidatedOutput(name="João", email="j@example.com", password="secret1", techs=[])

        assert '"João"' in output.to_display()


def test_tech_entry_values_exclude_key():
    assert TechEntry(key="tech-1", title="Go", knowledge="7").to_values() == {"title": "Go", "knowledge": "7"}


def test_validation_result_ok_requires_output():
    assert not ValidationResult().ok
    assert not ValidationResult(errors={"name": "Name is required"}).ok
