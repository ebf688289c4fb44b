# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from authcore.domain.users.entities import User as DomainUser
from authcore.domain.users.exceptions import UserAlreadyExistsError
from authcore.domain.users.repositories import UserRepository
from authcore.infrastructure.db.models import User
from authcore.infrastructure.db.session import session_scope
from authcore.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        is_active=row.is_active,
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_username(self, username: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_username_or_email(self, username: str, email: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(
                select(User)
                .where(or_(User.username == username, User.email == email))
                .order_by(User.id)
            ).first()
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    is_active=user.is_active,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration; the unique index decided.
            logger.warning(f"auth.register: unique constraint violated username={user.username}")
            raise UserAlreadyExistsError() from exc
