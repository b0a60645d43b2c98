from __future__ import annotations

from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# The service sends ids as strings; tolerate numbers from other builds
StrId = Annotated[str, BeforeValidator(str)]


class Ref(BaseModel):
    id: StrId


# Todo schemas
class TodoBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    done_status: bool = Field(False, alias="doneStatus")
    description: str | None = None


class TodoCreate(TodoBase):
    description: str = ""


class TodoOut(TodoBase):
    id: StrId
    categories: List[Ref] = []
    tasksof: List[Ref] = []


# Category schemas
class CategoryBase(BaseModel):
    title: str
    description: str | None = None


class CategoryCreate(CategoryBase):
    description: str = ""


class CategoryOut(CategoryBase):
    id: StrId
    todos: List[Ref] = []
    projects: List[Ref] = []


# Project schemas
class ProjectBase(BaseModel):
    title: str
    description: str | None = None
    completed: bool = False


class ProjectCreate(ProjectBase):
    description: str = ""


class ProjectOut(ProjectBase):
    id: StrId
    # Untitled projects are accepted by the service
    title: str | None = None
    active: bool | None = None
    tasks: List[Ref] = []
    categories: List[Ref] = []


OUT_SCHEMAS = {
    "todos": TodoOut,
    "categories": CategoryOut,
    "projects": ProjectOut,
}
