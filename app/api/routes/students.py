from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.config import get_settings
from app.core.security import Identity
from app.db.repo.students_repo import StudentsRepo
from app.db.session import SessionLocal
from app.services.accounts import (
    AccountNotFoundError,
    AccountService,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    PasswordChangeError,
    StudentFields,
)
from app.services.auth_gate import extract_client_ip, get_current_identity, require_superadmin
from app.services.login_rate_limit import LoginRateLimitedError, get_login_rate_limiter

from .accounts_models import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    StudentCreateRequest,
    StudentListResponse,
    StudentLoginResponse,
    StudentResponse,
    StudentUpdateRequest,
    password_change_http_error,
    student_response,
)

router = APIRouter(prefix="/api/students", tags=["students"])
logger = structlog.get_logger(__name__)


def _student_fields(payload: StudentUpdateRequest) -> StudentFields:
    return StudentFields(
        name=payload.name,
        phone=payload.phone,
        dob=payload.dob,
        gender=payload.gender,
        class_name=payload.class_name,
    )


@router.post("/login", response_model=StudentLoginResponse)
async def login(payload: LoginRequest, request: Request) -> StudentLoginResponse:
    client_ip = extract_client_ip(request, trusted_proxies=get_settings().trusted_proxies)
    try:
        async with SessionLocal() as session:
            result = await AccountService.login_student(
                session,
                limiter=get_login_rate_limiter(),
                email=payload.email,
                password=payload.password,
                client_ip=client_ip,
            )
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=400, detail={"code": "E_INVALID_CREDENTIALS"}) from exc
    except LoginRateLimitedError as exc:
        raise HTTPException(status_code=429, detail={"code": "E_LOGIN_RATE_LIMITED"}) from exc

    return StudentLoginResponse(token=result.token, student=student_response(result.student))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    try:
        async with SessionLocal.begin() as session:
            await AccountService.change_password(
                session,
                identity=identity,
                current_password=payload.current_password,
                new_password=payload.new_password,
                confirm_password=payload.confirm_password,
                now_utc=datetime.now(timezone.utc),
            )
    except PasswordChangeError as exc:
        raise password_change_http_error(exc) from exc
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_ACCOUNT_NOT_FOUND"}) from exc
    return MessageResponse(message="Password changed successfully")


@router.get("", response_model=StudentListResponse)
async def list_students(identity: Identity = Depends(get_current_identity)) -> StudentListResponse:
    async with SessionLocal() as session:
        students = await StudentsRepo.list_all(session)
    return StudentListResponse(students=[student_response(student) for student in students])


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: int,
    identity: Identity = Depends(get_current_identity),
) -> StudentResponse:
    async with SessionLocal() as session:
        student = await StudentsRepo.get_by_id(session, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail={"code": "E_STUDENT_NOT_FOUND"})
    return student_response(student)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreateRequest,
    identity: Identity = Depends(require_superadmin),
) -> StudentResponse:
    try:
        async with SessionLocal.begin() as session:
            student = await AccountService.create_student(
                session,
                email=payload.email,
                password=payload.password,
                fields=_student_fields(payload),
                now_utc=datetime.now(timezone.utc),
            )
            response = student_response(student)
    except EmailAlreadyExistsError as exc:
        raise HTTPException(status_code=400, detail={"code": "E_EMAIL_EXISTS"}) from exc
    logger.info("student_created", student_id=response.id, created_by=identity.subject_id)
    return response


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    payload: StudentUpdateRequest,
    identity: Identity = Depends(require_superadmin),
) -> StudentResponse:
    try:
        async with SessionLocal.begin() as session:
            student = await AccountService.update_student(
                session,
                student_id=student_id,
                fields=_student_fields(payload),
                password=payload.password,
                now_utc=datetime.now(timezone.utc),
            )
            response = student_response(student)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_STUDENT_NOT_FOUND"}) from exc
    return response


@router.delete("/{student_id}", response_model=MessageResponse)
async def delete_student(
    student_id: int,
    identity: Identity = Depends(require_superadmin),
) -> MessageResponse:
    async with SessionLocal.begin() as session:
        deleted = await StudentsRepo.delete(session, student_id)
    if not deleted:
        raise HTTPException(status_code=404, detail={"code": "E_STUDENT_NOT_FOUND"})
    logger.info("student_deleted", student_id=student_id, deleted_by=identity.subject_id)
    return MessageResponse(message="Student deleted")
