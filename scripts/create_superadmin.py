from __future__ import annotations

import argparse
import asyncio
import getpass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.core.security import ROLE_SUPERADMIN
from app.db.repo.admins_repo import AdminsRepo
from app.db.session import SessionLocal, dispose_engine
from app.services.accounts import AccountService, AdminFields

MIN_PASSWORD_LENGTH = 6


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the initial superadmin account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Super Admin")
    parser.add_argument(
        "--password",
        default=None,
        help="Password for the account. Prompted for when omitted.",
    )
    return parser.parse_args()


def _validate_credentials(*, email: str, password: str) -> None:
    if "@" not in email.strip():
        raise ValueError("email must contain '@'")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")


async def _create_superadmin(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    password: str,
    now_utc: datetime,
) -> bool:
    if await AdminsRepo.get_by_email(session, email) is not None:
        return False
    await AccountService.create_admin(
        session,
        email=email,
        password=password,
        fields=AdminFields(name=name, phone="", dob="", gender=""),
        now_utc=now_utc,
        role=ROLE_SUPERADMIN,
    )
    return True


async def _run(*, email: str, name: str, password: str) -> bool:
    try:
        async with SessionLocal.begin() as session:
            return await _create_superadmin(
                session,
                email=email,
                name=name,
                password=password,
                now_utc=datetime.now(timezone.utc),
            )
    finally:
        await dispose_engine()


def main() -> int:
    args = _parse_args()
    configure_logging(get_settings().log_level)
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    try:
        _validate_credentials(email=args.email, password=password)
    except ValueError as exc:
        print(f"create_superadmin: {exc}")  # noqa: T201
        return 2

    created = asyncio.run(_run(email=args.email, name=args.name, password=password))
    if created:
        print(f"create_superadmin: created email={args.email.strip().lower()}")  # noqa: T201
    else:
        print(f"create_superadmin: exists email={args.email.strip().lower()}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
