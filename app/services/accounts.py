from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import (
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_SUPERADMIN,
    Identity,
    create_access_token,
    hash_password,
    verify_password,
)
from app.db.models.admins import Admin
from app.db.models.students import Student
from app.db.repo.admins_repo import AdminsRepo
from app.db.repo.students_repo import StudentsRepo
from app.services.login_rate_limit import LoginRateLimiter

logger = structlog.get_logger(__name__)


class AccountError(Exception):
    pass


class InvalidCredentialsError(AccountError):
    pass


class EmailAlreadyExistsError(AccountError):
    pass


class AccountNotFoundError(AccountError):
    pass


class PasswordChangeError(AccountError):
    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


@dataclass(frozen=True, slots=True)
class StudentLoginResult:
    token: str
    student: Student


@dataclass(frozen=True, slots=True)
class AdminLoginResult:
    token: str
    admin: Admin


@dataclass(frozen=True, slots=True)
class StudentFields:
    name: str
    phone: str
    dob: str
    gender: str
    class_name: str


@dataclass(frozen=True, slots=True)
class AdminFields:
    name: str
    phone: str
    dob: str
    gender: str


class AccountService:
    @staticmethod
    async def _register_failed_login(
        limiter: LoginRateLimiter,
        *,
        email: str,
        client_ip: str | None,
        account_type: str,
    ) -> None:
        failures = await limiter.register_failure(email=email, client_ip=client_ip)
        logger.info("login_failed", account_type=account_type, client_ip=client_ip, failures=failures)

    @staticmethod
    async def login_student(
        session: AsyncSession,
        *,
        limiter: LoginRateLimiter,
        email: str,
        password: str,
        client_ip: str | None,
    ) -> StudentLoginResult:
        await limiter.ensure_allowed(email=email, client_ip=client_ip)
        student = await StudentsRepo.get_by_email(session, email)
        if student is None or not verify_password(password, student.password_hash):
            await AccountService._register_failed_login(
                limiter,
                email=email,
                client_ip=client_ip,
                account_type=ROLE_STUDENT,
            )
            raise InvalidCredentialsError

        await limiter.reset(email=email, client_ip=client_ip)
        token = create_access_token(subject_id=student.id, role=ROLE_STUDENT, email=student.email)
        logger.info("login_succeeded", account_type=ROLE_STUDENT, subject_id=student.id)
        return StudentLoginResult(token=token, student=student)

    @staticmethod
    async def login_admin(
        session: AsyncSession,
        *,
        limiter: LoginRateLimiter,
        email: str,
        password: str,
        client_ip: str | None,
    ) -> AdminLoginResult:
        await limiter.ensure_allowed(email=email, client_ip=client_ip)
        admin = await AdminsRepo.get_by_email(session, email)
        if admin is None or not verify_password(password, admin.password_hash):
            await AccountService._register_failed_login(
                limiter,
                email=email,
                client_ip=client_ip,
                account_type=ROLE_ADMIN,
            )
            raise InvalidCredentialsError

        await limiter.reset(email=email, client_ip=client_ip)
        token = create_access_token(subject_id=admin.id, role=admin.role, email=admin.email)
        logger.info("login_succeeded", account_type=admin.role, subject_id=admin.id)
        return AdminLoginResult(token=token, admin=admin)

    @staticmethod
    async def change_password(
        session: AsyncSession,
        *,
        identity: Identity,
        current_password: str,
        new_password: str,
        confirm_password: str,
        now_utc: datetime,
    ) -> None:
        if not current_password or not new_password or not confirm_password:
            raise PasswordChangeError("E_FIELDS_REQUIRED")
        if new_password != confirm_password:
            raise PasswordChangeError("E_PASSWORD_MISMATCH")

        account: Student | Admin | None
        if identity.is_student:
            account = await StudentsRepo.get_by_id_for_update(session, identity.subject_id)
        else:
            account = await AdminsRepo.get_by_id_for_update(session, identity.subject_id)
        if account is None:
            raise AccountNotFoundError

        if not verify_password(current_password, account.password_hash):
            raise PasswordChangeError("E_CURRENT_PASSWORD_INCORRECT")

        account.password_hash = hash_password(new_password)
        account.updated_at = now_utc
        await session.flush()
        logger.info("password_changed", role=identity.role, subject_id=identity.subject_id)

    @staticmethod
    async def create_student(
        session: AsyncSession,
        *,
        email: str,
        password: str,
        fields: StudentFields,
        now_utc: datetime,
    ) -> Student:
        if await StudentsRepo.get_by_email(session, email) is not None:
            raise EmailAlreadyExistsError
        return await StudentsRepo.create(
            session,
            name=fields.name,
            email=email,
            phone=fields.phone,
            dob=fields.dob,
            gender=fields.gender,
            class_name=fields.class_name,
            password_hash=hash_password(password),
            now_utc=now_utc,
        )

    @staticmethod
    async def update_student(
        session: AsyncSession,
        *,
        student_id: int,
        fields: StudentFields,
        password: str | None,
        now_utc: datetime,
    ) -> Student:
        student = await StudentsRepo.get_by_id_for_update(session, student_id)
        if student is None:
            raise AccountNotFoundError
        student.name = fields.name
        student.phone = fields.phone
        student.dob = fields.dob
        student.gender = fields.gender
        student.class_name = fields.class_name
        if password and password.strip():
            student.password_hash = hash_password(password)
        student.updated_at = now_utc
        await session.flush()
        return student

    @staticmethod
    async def create_admin(
        session: AsyncSession,
        *,
        email: str,
        password: str,
        fields: AdminFields,
        now_utc: datetime,
        role: str = ROLE_ADMIN,
    ) -> Admin:
        if role not in {ROLE_ADMIN, ROLE_SUPERADMIN}:
            raise ValueError(f"unsupported admin role: {role}")
        if await AdminsRepo.get_by_email(session, email) is not None:
            raise EmailAlreadyExistsError
        return await AdminsRepo.create(
            session,
            name=fields.name,
            email=email,
            phone=fields.phone,
            dob=fields.dob,
            gender=fields.gender,
            password_hash=hash_password(password),
            role=role,
            now_utc=now_utc,
        )

    @staticmethod
    async def update_admin(
        session: AsyncSession,
        *,
        admin_id: int,
        fields: AdminFields,
        password: str | None,
        now_utc: datetime,
    ) -> Admin:
        admin = await AdminsRepo.get_by_id_for_update(session, admin_id)
        if admin is None:
            raise AccountNotFoundError
        admin.name = fields.name
        admin.phone = fields.phone
        admin.dob = fields.dob
        admin.gender = fields.gender
        if password and password.strip():
            admin.password_hash = hash_password(password)
        admin.updated_at = now_utc
        await session.flush()
        return admin
