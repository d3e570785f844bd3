"""
Project configuration model.
"""

import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_WHITESPACE_RE = re.compile(r"\s+")
# npm package name characters; the id is also the project directory name
_PROJECT_ID_RE = re.compile(r"^[a-z0-9][a-z0-9._~-]*$")


def normalize_project_id(name: str) -> str:
    """Lowercase the name, strip it, and join inner whitespace runs with '-'."""
    return _WHITESPACE_RE.sub("-", name.strip().lower())


class ProjectConfig(BaseModel):
    """Answers collected once per run and embedded into generated files."""
    project_name: str = Field(..., description="Human readable project name")
    contact_email: str = Field(..., description="Developer contact email")
    api_key: str = Field(..., description="Platform API key")
    support_url: Optional[str] = Field(None, description="Support page URL")
    vendor: Optional[str] = Field(None, description="Vendor or company name")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "project_name": "My Tool",
                "contact_email": "dev@example.com",
                "api_key": "ak_live_123",
                "support_url": "https://example.com/support",
                "vendor": "Example Inc"
            }
        }
    )

    @field_validator('project_name')
    @classmethod
    def validate_project_name(cls, v):
        project_id = normalize_project_id(v)
        if not project_id:
            raise ValueError("Project name must not be blank")
        if not _PROJECT_ID_RE.match(project_id):
            raise ValueError(
                f"Project name '{v.strip()}' gives an invalid package name '{project_id}': "
                "use letters, digits, spaces, '-', '.' or '_', starting with a letter or digit"
            )
        return v.strip()

    @field_validator('contact_email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError(f"Invalid contact email: {v}")
        return v

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("API key must not be blank")
        return v

    @field_validator('support_url', 'vendor')
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator('support_url')
    @classmethod
    def validate_support_url(cls, v):
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"Support URL must start with http:// or https://: {v}")
        return v

    @property
    def project_id(self) -> str:
        """Package identifier used in the manifest and as the directory name."""
        return normalize_project_id(self.project_name)
