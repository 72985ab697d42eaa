"""
Data models for release metadata payloads.

These Pydantic models validate the JSON returned by the releases API so that
the rest of the installer only ever sees a well-formed tag.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def validate_tag(tag: str) -> str:
    """
    Normalize a release tag and check it is usable as one URL path segment.

    Raises:
        ValueError: If the tag is blank or contains "/" or whitespace
    """
    tag = tag.strip()
    if not tag:
        raise ValueError("release tag is empty")
    if "/" in tag or any(ch.isspace() for ch in tag):
        raise ValueError(f"release tag is not a valid path segment: {tag!r}")
    return tag


class ReleaseAsset(BaseModel):
    """One downloadable asset attached to a release."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Asset file name")
    browser_download_url: Optional[str] = Field(default=None, description="Direct download URL")
    size: Optional[int] = Field(default=None, description="Asset size in bytes")


class GithubRelease(BaseModel):
    """
    Subset of the GitHub ``releases/latest`` response.

    Only ``tag_name`` is required; everything else is informational.
    """
    model_config = ConfigDict(extra="ignore")

    tag_name: str = Field(..., description="Version tag, e.g. v1.2.3")
    name: Optional[str] = Field(default=None, description="Release title")
    html_url: Optional[str] = Field(default=None, description="Release page URL")
    prerelease: bool = Field(default=False)
    assets: List[ReleaseAsset] = Field(default_factory=list)

    @field_validator("tag_name")
    @classmethod
    def validate_tag_name(cls, v: str) -> str:
        return validate_tag(v)

    def asset_names(self) -> List[str]:
        return [asset.name for asset in self.assets]
