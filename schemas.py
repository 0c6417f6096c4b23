from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models import TaskStatus


# Users and auth

class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)

    @field_validator('name')
    @classmethod
    def name_validator(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()

    @field_validator('email')
    @classmethod
    def email_validator(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def password_validator(cls, v):
        if len(v) < 6:
            raise ValueError('Please enter a password with 6 or more characters')
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def email_validator(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def password_validator(cls, v):
        if not v:
            raise ValueError('Password is required')
        return v


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    success: bool = True
    user: UserOut
    token: str


class MeResponse(BaseModel):
    success: bool = True
    user: UserOut


# Tasks

def _clean_title(v):
    if v is None or not v.strip():
        raise ValueError('Title is required')
    if len(v.strip()) > 200:
        raise ValueError('Title must be at most 200 characters')
    return v.strip()


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = Field("", max_length=1000)
    status: TaskStatus = TaskStatus.PENDING

    @field_validator('title')
    @classmethod
    def title_validator(cls, v):
        return _clean_title(v)

    @field_validator('description')
    @classmethod
    def description_validator(cls, v):
        return v or ""


class TaskUpdate(BaseModel):
    """Partial update: only the fields present in the request are applied."""

    title: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = None

    @field_validator('title')
    @classmethod
    def title_validator(cls, v):
        return _clean_title(v)

    @field_validator('status', mode='before')
    @classmethod
    def status_validator(cls, v):
        if v is None:
            raise ValueError('Status cannot be empty')
        return v

    def changes(self) -> Dict:
        fields = self.model_dump(exclude_unset=True)
        if "description" in fields and fields["description"] is None:
            fields["description"] = ""
        if "status" in fields:
            fields["status"] = TaskStatus(fields["status"]).value
        return fields


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    status: TaskStatus
    owner_id: int
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    success: bool = True
    data: TaskOut


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")


class TaskListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    pagination: Pagination
    data: List[TaskOut]


class DeleteResponse(BaseModel):
    success: bool = True
    data: Dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    success: bool = True
    status: str = "ok"
