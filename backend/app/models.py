"""
Table models for the project tracker.

Column names in MySQL are Spanish (nombre, descripcion, estado); the model
attributes and JSON payloads use English names.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel


class Project(SQLModel, table=True):
    __tablename__ = "proyectos"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column("nombre", String(255), nullable=False))
    description: str | None = Field(
        default=None, sa_column=Column("descripcion", Text, nullable=True)
    )
    status: str = Field(
        default="activo",
        sa_column=Column("estado", String(50), nullable=False, default="activo"),
    )


class Subproject(SQLModel, table=True):
    __tablename__ = "sub_proyectos"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column("nombre", String(255), nullable=False))
    description: str | None = Field(
        default=None, sa_column=Column("descripcion", Text, nullable=True)
    )
    status: str | None = Field(
        default=None, sa_column=Column("estado", String(50), nullable=True)
    )
    project_id: int = Field(
        sa_column=Column(
            "project_id",
            Integer,
            ForeignKey("proyectos.id"),
            nullable=False,
            index=True,
        )
    )
