"""
Tests for release metadata models.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from hola_installer.models import GithubRelease, validate_tag


class TestGithubRelease:
    """Test validation of the releases API payload."""

    def test_minimal_payload(self):
        release = GithubRelease.model_validate({"tag_name": "v1.0.0"})
        assert release.tag_name == "v1.0.0"
        assert release.assets == []
        assert not release.prerelease

    def test_extra_fields_ignored(self):
        release = GithubRelease.model_validate({
            "tag_name": "v2.0.0",
            "id": 123,
            "author": {"login": "someone"},
            "assets": [{"name": "hola-linux-amd64.tar.xz", "size": 10, "id": 7}],
        })
        assert release.asset_names() == ["hola-linux-amd64.tar.xz"]
        assert release.assets[0].size == 10

    def test_tag_whitespace_stripped(self):
        assert GithubRelease.model_validate({"tag_name": " v1.0.0\n"}).tag_name == "v1.0.0"

    def test_missing_tag_rejected(self):
        with pytest.raises(ValidationError):
            GithubRelease.model_validate({"name": "Release"})

    @pytest.mark.parametrize("tag", ["", "   ", "v1/evil", "v1 0"])
    def test_invalid_tag_rejected(self, tag):
        with pytest.raises(ValidationError):
            GithubRelease.model_validate({"tag_name": tag})

    def test_non_string_tag_rejected(self):
        with pytest.raises(ValidationError):
            GithubRelease.model_validate({"tag_name": None})


class TestValidateTag:
    """Test the tag check shared by API and pinned tags."""

    def test_valid_tag(self):
        assert validate_tag(" v1.2.3-rc.1 ") == "v1.2.3-rc.1"

    @pytest.mark.parametrize("tag", ["", "\t", "a/b", "v1 beta"])
    def test_invalid_tag(self, tag):
        with pytest.raises(ValueError, match="release tag"):
            validate_tag(tag)
