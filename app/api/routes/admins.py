from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.config import get_settings
from app.core.security import ROLE_ADMIN, Identity
from app.db.repo.admins_repo import AdminsRepo
from app.db.session import SessionLocal
from app.services.accounts import (
    AccountNotFoundError,
    AccountService,
    AdminFields,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    PasswordChangeError,
)
from app.services.auth_gate import extract_client_ip, get_current_identity, require_superadmin
from app.services.login_rate_limit import LoginRateLimitedError, get_login_rate_limiter

from .accounts_models import (
    AdminCreateRequest,
    AdminListResponse,
    AdminLoginResponse,
    AdminResponse,
    AdminUpdateRequest,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    admin_response,
    password_change_http_error,
)

router = APIRouter(prefix="/api/admins", tags=["admins"])
logger = structlog.get_logger(__name__)


def _admin_fields(payload: AdminUpdateRequest) -> AdminFields:
    return AdminFields(
        name=payload.name,
        phone=payload.phone,
        dob=payload.dob,
        gender=payload.gender,
    )


@router.post("/login", response_model=AdminLoginResponse)
async def login(payload: LoginRequest, request: Request) -> AdminLoginResponse:
    client_ip = extract_client_ip(request, trusted_proxies=get_settings().trusted_proxies)
    try:
        async with SessionLocal() as session:
            result = await AccountService.login_admin(
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

    return AdminLoginResponse(token=result.token, admin=admin_response(result.admin))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    if identity.is_student:
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})
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


@router.get("", response_model=AdminListResponse)
async def list_admins(identity: Identity = Depends(require_superadmin)) -> AdminListResponse:
    async with SessionLocal() as session:
        admins = await AdminsRepo.list_all(session)
    return AdminListResponse(admins=[admin_response(admin) for admin in admins])


@router.get("/{admin_id}", response_model=AdminResponse)
async def get_admin(
    admin_id: int,
    identity: Identity = Depends(require_superadmin),
) -> AdminResponse:
    async with SessionLocal() as session:
        admin = await AdminsRepo.get_by_id(session, admin_id)
    if admin is None:
        raise HTTPException(status_code=404, detail={"code": "E_ADMIN_NOT_FOUND"})
    return admin_response(admin)


@router.post("", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    payload: AdminCreateRequest,
    identity: Identity = Depends(require_superadmin),
) -> AdminResponse:
    try:
        async with SessionLocal.begin() as session:
            admin = await AccountService.create_admin(
                session,
                email=payload.email,
                password=payload.password,
                fields=_admin_fields(payload),
                now_utc=datetime.now(timezone.utc),
                role=ROLE_ADMIN,
            )
            response = admin_response(admin)
    except EmailAlreadyExistsError as exc:
        raise HTTPException(status_code=400, detail={"code": "E_EMAIL_EXISTS"}) from exc
    logger.info("admin_created", admin_id=response.id, created_by=identity.subject_id)
    return response


@router.put("/{admin_id}", response_model=AdminResponse)
async def update_admin(
    admin_id: int,
    payload: AdminUpdateRequest,
    identity: Identity = Depends(require_superadmin),
) -> AdminResponse:
    try:
        async with SessionLocal.begin() as session:
            admin = await AccountService.update_admin(
                session,
                admin_id=admin_id,
                fields=_admin_fields(payload),
                password=payload.password,
                now_utc=datetime.now(timezone.utc),
            )
            response = admin_response(admin)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_ADMIN_NOT_FOUND"}) from exc
    return response


@router.delete("/{admin_id}", response_model=MessageResponse)
async def delete_admin(
    admin_id: int,
    identity: Identity = Depends(require_superadmin),
) -> MessageResponse:
    if admin_id == identity.subject_id:
        raise HTTPException(status_code=400, detail={"code": "E_CANNOT_DELETE_SELF"})
    async with SessionLocal.begin() as session:
        deleted = await AdminsRepo.delete(session, admin_id)
    if not deleted:
        raise HTTPException(status_code=404, detail={"code": "E_ADMIN_NOT_FOUND"})
    logger.info("admin_deleted", admin_id=admin_id, deleted_by=identity.subject_id)
    return MessageResponse(message="Admin deleted")
