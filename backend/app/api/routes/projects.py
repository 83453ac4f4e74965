"""
Project endpoints: list, create, read, update, delete.

Plain parameterised SQL through the connection pool.
"""

from typing import Any

import pymysql
from fastapi import APIRouter

from app.api.deps import PoolDep, parse_id
from app.api.errors import (
    Conflict,
    NotFound,
    ValidationFailed,
    translate_db_errors,
)
from app.core.pool import PoolManager
from app.schemas import (
    MessageOut,
    ProjectCreate,
    ProjectListOut,
    ProjectOut,
    ProjectPublic,
    ProjectUpdate,
    has_blank,
)

router = APIRouter(prefix="/projects", tags=["projects"])

INVALID_ID = "Invalid Project ID"
NOT_FOUND = "Project not found"
DEFAULT_STATUS = "activo"

_SELECT_PROJECT = (
    "SELECT id, nombre AS name, descripcion AS description, estado AS status "
    "FROM proyectos"
)


def get_project_row(pool: PoolManager, project_id: int) -> dict[str, Any] | None:
    rows = pool.query(f"{_SELECT_PROJECT} WHERE id = %s", [project_id])
    return rows[0] if rows else None


@router.get("", response_model=ProjectListOut)
def list_projects(pool: PoolDep) -> Any:
    """All projects ordered by name."""
    with translate_db_errors("Error loading projects"):
        rows = pool.query(f"{_SELECT_PROJECT} ORDER BY nombre ASC")
    return ProjectListOut(projects=[ProjectPublic.model_validate(r) for r in rows])


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(pool: PoolDep, body: ProjectCreate) -> Any:
    """Create a project; status defaults to 'activo'."""
    if has_blank(body.name):
        raise ValidationFailed("Name is required")
    status = body.status or DEFAULT_STATUS
    with translate_db_errors("Error creating project"):
        result = pool.execute(
            "INSERT INTO proyectos (nombre, descripcion, estado) VALUES (%s, %s, %s)",
            [body.name, body.description, status],
        )
    project = ProjectPublic(
        id=result.last_insert_id,
        name=body.name,
        description=body.description,
        status=status,
    )
    return ProjectOut(message="Project created", project=project)


@router.get("/{id}", response_model=ProjectOut)
def read_project(pool: PoolDep, id: str) -> Any:
    project_id = parse_id(id, INVALID_ID)
    with translate_db_errors("Error loading project"):
        row = get_project_row(pool, project_id)
    if row is None:
        raise NotFound(NOT_FOUND)
    return ProjectOut(project=ProjectPublic.model_validate(row))


@router.put("/{id}", response_model=ProjectOut)
def update_project(pool: PoolDep, id: str, body: ProjectUpdate) -> Any:
    project_id = parse_id(id, INVALID_ID)
    if has_blank(body.name, body.description, body.status):
        raise ValidationFailed("All fields are required")
    with translate_db_errors("Error updating project"):
        # rowcount is 0 when values are unchanged, so existence is checked separately
        if get_project_row(pool, project_id) is None:
            raise NotFound(NOT_FOUND)
        pool.execute(
            "UPDATE proyectos SET nombre = %s, descripcion = %s, estado = %s WHERE id = %s",
            [body.name, body.description, body.status, project_id],
        )
    project = ProjectPublic(
        id=project_id, name=body.name, description=body.description, status=body.status
    )
    return ProjectOut(message="Project updated", project=project)


@router.delete("/{id}", response_model=MessageOut)
def delete_project(pool: PoolDep, id: str) -> Any:
    project_id = parse_id(id, INVALID_ID)
    with translate_db_errors("Error deleting project"):
        try:
            result = pool.execute("DELETE FROM proyectos WHERE id = %s", [project_id])
        except pymysql.err.IntegrityError as e:
            raise Conflict("Project still has subprojects") from e
    if result.rowcount == 0:
        raise NotFound(NOT_FOUND)
    return MessageOut(message="Project deleted")
