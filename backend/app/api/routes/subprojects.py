"""
Subproject endpoints.

by-project/{id} goes through the ORM session; the CRUD routes use plain
parameterised SQL on the connection pool.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request
from sqlmodel import select

from app.api.deps import PoolDep, SessionDep, parse_id
from app.api.errors import (
    MethodNotAllowed,
    NotFound,
    ValidationFailed,
    translate_db_errors,
)
from app.api.routes.projects import get_project_row
from app.core.pool import PoolManager
from app.models import Subproject
from app.schemas import (
    MessageOut,
    SubprojectCreate,
    SubprojectListOut,
    SubprojectOut,
    SubprojectPublic,
    SubprojectUpdate,
    SubprojectWithProject,
    SubprojectWithProjectListOut,
    has_blank,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subprojects", tags=["subprojects"])

INVALID_ID = "Invalid Subproject ID"
NOT_FOUND = "Subproject not found"

# Registered for every method so non-GET gets our 405 body, not the framework's
LOOKUP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

_SELECT_SUBPROJECT = (
    "SELECT id, nombre AS name, descripcion AS description, estado AS status, project_id "
    "FROM sub_proyectos"
)


def _get_subproject_row(pool: PoolManager, subproject_id: int) -> dict[str, Any] | None:
    rows = pool.query(f"{_SELECT_SUBPROJECT} WHERE id = %s", [subproject_id])
    return rows[0] if rows else None


@router.api_route(
    "/by-project/{id}",
    methods=LOOKUP_METHODS,
    response_model=SubprojectListOut,
)
def list_subprojects_by_project(request: Request, session: SessionDep, id: str) -> Any:
    """
    Subprojects of one project, ordered by name ascending.

    405 for anything but GET (checked before the id), 400 for a non-integer
    id, 200 with a possibly empty list otherwise. Ordering follows the
    column collation of sub_proyectos.nombre.
    """
    if request.method != "GET":
        raise MethodNotAllowed(allowed=["GET"])
    project_id = parse_id(id, "Invalid Project ID")

    # Any failure past validation is reported as the same 500
    with translate_db_errors("Error loading subprojects", errors=(Exception,)):
        stmt = (
            select(Subproject)
            .where(Subproject.project_id == project_id)
            .order_by(Subproject.name.asc())  # type: ignore[union-attr]
        )
        rows = session.exec(stmt).all()
        result = SubprojectListOut(
            subprojects=[SubprojectPublic.model_validate(r) for r in rows]
        )
    logger.debug("Project %s has %d subprojects", project_id, len(rows))
    return result


@router.get("", response_model=SubprojectWithProjectListOut)
def list_subprojects(pool: PoolDep) -> Any:
    """All subprojects with the name of their parent project."""
    with translate_db_errors("Error loading subprojects"):
        rows = pool.query(
            "SELECT sub.id, sub.nombre AS name, sub.descripcion AS description, "
            "sub.estado AS status, sub.project_id, pro.nombre AS project_name "
            "FROM sub_proyectos sub "
            "INNER JOIN proyectos pro ON pro.id = sub.project_id "
            "ORDER BY sub.nombre ASC"
        )
    return SubprojectWithProjectListOut(
        subprojects=[SubprojectWithProject.model_validate(r) for r in rows]
    )


@router.post("", response_model=SubprojectOut, status_code=201)
def create_subproject(pool: PoolDep, body: SubprojectCreate) -> Any:
    if has_blank(body.name, body.description, body.status, body.project_id):
        raise ValidationFailed("All fields are required")
    with translate_db_errors("Error creating subproject"):
        if get_project_row(pool, body.project_id) is None:
            raise ValidationFailed("Project not found")
        result = pool.execute(
            "INSERT INTO sub_proyectos (nombre, descripcion, estado, project_id) "
            "VALUES (%s, %s, %s, %s)",
            [body.name, body.description, body.status, body.project_id],
        )
    subproject = SubprojectPublic(
        id=result.last_insert_id,
        name=body.name,
        description=body.description,
        status=body.status,
        project_id=body.project_id,
    )
    return SubprojectOut(message="Subproject created", subproject=subproject)


@router.get("/{id}", response_model=SubprojectOut)
def read_subproject(pool: PoolDep, id: str) -> Any:
    subproject_id = parse_id(id, INVALID_ID)
    with translate_db_errors("Error loading subproject"):
        row = _get_subproject_row(pool, subproject_id)
    if row is None:
        raise NotFound(NOT_FOUND)
    return SubprojectOut(subproject=SubprojectPublic.model_validate(row))


@router.put("/{id}", response_model=SubprojectOut)
def update_subproject(pool: PoolDep, id: str, body: SubprojectUpdate) -> Any:
    subproject_id = parse_id(id, INVALID_ID)
    if has_blank(body.name, body.description, body.status):
        raise ValidationFailed("All fields are required")
    with translate_db_errors("Error updating subproject"):
        row = _get_subproject_row(pool, subproject_id)
        if row is None:
            raise NotFound(NOT_FOUND)
        pool.execute(
            "UPDATE sub_proyectos SET nombre = %s, descripcion = %s, estado = %s "
            "WHERE id = %s",
            [body.name, body.description, body.status, subproject_id],
        )
    subproject = SubprojectPublic(
        id=subproject_id,
        name=body.name,
        description=body.description,
        status=body.status,
        project_id=row["project_id"],
    )
    return SubprojectOut(message="Subproject updated", subproject=subproject)


@router.delete("/{id}", response_model=MessageOut)
def delete_subproject(pool: PoolDep, id: str) -> Any:
    subproject_id = parse_id(id, INVALID_ID)
    with translate_db_errors("Error deleting subproject"):
        result = pool.execute("DELETE FROM sub_proyectos WHERE id = %s", [subproject_id])
    if result.rowcount == 0:
        raise NotFound(NOT_FOUND)
    return MessageOut(message="Subproject deleted")
