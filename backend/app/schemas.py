"""
Request and response schemas for the project/subproject API.
"""

from typing import Any, Literal

from pydantic import Field
from sqlmodel import SQLModel

# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


class ProjectCreate(SQLModel):
    """Body for POST /projects. Only name is mandatory."""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str | None = Field(default=None, max_length=50)


class ProjectUpdate(SQLModel):
    """Body for PUT /projects/{id}; every field must be non-empty."""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str | None = Field(default=None, max_length=50)


class ProjectPublic(SQLModel):
    id: int
    name: str
    description: str | None = None
    status: str | None = None


class ProjectListOut(SQLModel):
    status: Literal["success"] = "success"
    projects: list[ProjectPublic]


class ProjectOut(SQLModel):
    status: Literal["success"] = "success"
    message: str | None = None
    project: ProjectPublic


# ---------------------------------------------------------------------------
# Subproject
# ---------------------------------------------------------------------------


class SubprojectCreate(SQLModel):
    """Body for POST /subprojects; all fields required."""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str | None = Field(default=None, max_length=50)
    project_id: int | None = None


class SubprojectUpdate(SQLModel):
    """Body for PUT /subprojects/{id}; project_id cannot be changed."""

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str | None = Field(default=None, max_length=50)


class SubprojectPublic(SQLModel):
    id: int
    name: str
    description: str | None = None
    status: str | None = None
    project_id: int


class SubprojectWithProject(SubprojectPublic):
    project_name: str | None = None


class SubprojectListOut(SQLModel):
    status: Literal["success"] = "success"
    subprojects: list[SubprojectPublic]


class SubprojectWithProjectListOut(SQLModel):
    status: Literal["success"] = "success"
    subprojects: list[SubprojectWithProject]


class SubprojectOut(SQLModel):
    status: Literal["success"] = "success"
    message: str | None = None
    subproject: SubprojectPublic


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


class MessageOut(SQLModel):
    status: Literal["success"] = "success"
    message: str


class HealthOut(SQLModel):
    status: Literal["UP"] = "UP"
    results: list[dict[str, Any]]


def has_blank(*values: Any) -> bool:
    """True if any value is None or a whitespace-only string."""
    return any(v is None or (isinstance(v, str) and not v.strip()) for v in values)
