from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .models import Role
from .openapi import SchemaDescriptor


# ------------------ AUTH ------------------
class RegisterBody(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=100)
    # passwords are kept exactly as typed
    password: str = Field(min_length=6)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginBody(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


# ------------------ BOARDS ------------------
class BoardBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)


class ShareBody(BaseModel):
    email: EmailStr
    role: Role


class ShareRoleBody(BaseModel):
    role: Role


# ------------------ TASKS ------------------
class TaskCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    content: Optional[str] = None


class TaskUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title", "completed")
    @classmethod
    def not_null(cls, value):
        # only runs for keys that were sent; an explicit null is rejected
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskFilters(BaseModel):
    """Query-string filters for the task list."""

    completed: Optional[bool] = None
    q: Optional[str] = None
    page: Optional[int] = Field(default=None, ge=1)
    size: Optional[int] = Field(default=None, ge=1)

    @property
    def paginated(self):
        return self.page is not None and self.size is not None


class BulkDeleteFilters(BaseModel):
    completed: bool


class TaskOut(BaseModel):
    id: int
    boardId: int
    title: str
    content: Optional[str] = None
    completed: bool
    creatorId: int
    createdAt: str


# ------------------ PREFERENCES ------------------
class PreferencesBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auto_refresh_interval: Optional[int] = Field(default=None, alias="autoRefreshInterval", gt=0)
    task_view: Optional[Literal["grid", "list"]] = Field(default=None, alias="taskView")


# ------------------ OPENAPI COMPONENTS ------------------
SCHEMAS = (
    SchemaDescriptor("RegisterBody", RegisterBody),
    SchemaDescriptor("LoginBody", LoginBody),
    SchemaDescriptor("CreateBoardBody", BoardBody),
    SchemaDescriptor("UpdateBoardBody", BoardBody),
    SchemaDescriptor("ShareBody", ShareBody),
    SchemaDescriptor("ShareRoleBody", ShareRoleBody),
    SchemaDescriptor("TaskCreate", TaskCreate),
    SchemaDescriptor("TaskUpdate", TaskUpdate),
    SchemaDescriptor("TaskFilters", TaskFilters),
    SchemaDescriptor("BulkDeleteFilters", BulkDeleteFilters),
    SchemaDescriptor("Task", TaskOut),
    SchemaDescriptor("PreferencesBody", PreferencesBody),
)
