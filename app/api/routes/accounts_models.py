from __future__ import annotations

from datetime import datetime

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field

from app.db.models.admins import Admin
from app.db.models.students import Student
from app.services.accounts import PasswordChangeError


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=256)


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(default="", max_length=256, alias="currentPassword")
    new_password: str = Field(default="", max_length=256, alias="newPassword")
    confirm_password: str = Field(default="", max_length=256, alias="confirmPassword")


class StudentUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(default="", max_length=32)
    dob: str = Field(default="", max_length=32)
    gender: str = Field(default="", max_length=16)
    class_name: str = Field(default="", max_length=64, alias="className")
    password: str | None = Field(default=None, max_length=256)


class StudentCreateRequest(StudentUpdateRequest):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=256)


class AdminUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(default="", max_length=32)
    dob: str = Field(default="", max_length=32)
    gender: str = Field(default="", max_length=16)
    password: str | None = Field(default=None, max_length=256)


class AdminCreateRequest(AdminUpdateRequest):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=256)


class StudentResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    dob: str
    gender: str
    class_name: str
    role: str = "student"
    created_at: datetime | None = None


class AdminResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    dob: str
    gender: str
    role: str
    created_at: datetime | None = None


class StudentLoginResponse(BaseModel):
    token: str
    student: StudentResponse


class AdminLoginResponse(BaseModel):
    token: str
    admin: AdminResponse


class StudentListResponse(BaseModel):
    students: list[StudentResponse]


class AdminListResponse(BaseModel):
    admins: list[AdminResponse]


class MessageResponse(BaseModel):
    message: str


def student_response(student: Student) -> StudentResponse:
    return StudentResponse(
        id=student.id,
        name=student.name,
        email=student.email,
        phone=student.phone,
        dob=student.dob,
        gender=student.gender,
        class_name=student.class_name,
        created_at=student.created_at,
    )


def admin_response(admin: Admin) -> AdminResponse:
    return AdminResponse(
        id=admin.id,
        name=admin.name,
        email=admin.email,
        phone=admin.phone,
        dob=admin.dob,
        gender=admin.gender,
        role=admin.role,
        created_at=admin.created_at,
    )


def password_change_http_error(exc: PasswordChangeError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": exc.code})
