# accounts/infra/sql/sqlalchemy_credential_store.py
from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from accounts.models.user import User
from accounts.services._shared.errors import CredentialStoreError
from accounts.services._shared.ports import CredentialStore, Identity
from accounts.uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
    UnitOfWork,
)

F = TypeVar("F", bound=Callable[..., Any])


def _wrap_db_errors(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise CredentialStoreError(f"{func.__name__} failed: {exc.__class__.__name__}") from exc

    return wrapper  # type: ignore[return-value]


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        username=user.username,
        email=user.email,
        refresh_token=user.refresh_token,
    )


class SQLAlchemyCredentialStore(CredentialStore):
    """
    Credential store backed by the ``users`` table.

    Reads run in a read-only unit of work, token writes in a read-write one
    so they are committed before the caller hands tokens out.

    :param rw_uow: Factory for read-write units of work.
    :param ro_uow: Factory for read-only units of work.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], UnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], UnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    @_wrap_db_errors
    def find_by_id(self, user_id: int) -> Identity | None:
        with self._ro_uow() as uow:
            user = uow.users.get(user_id)
            return _to_identity(user) if user else None

    @_wrap_db_errors
    def find_by_username_or_email(
        self, username: str | None, email: str | None
    ) -> Identity | None:
        with self._ro_uow() as uow:
            user = uow.users.find_by_username_or_email(username=username, email=email)
            return _to_identity(user) if user else None

    @_wrap_db_errors
    def verify_password(self, identity: Identity, plaintext: str) -> bool:
        with self._ro_uow() as uow:
            user = uow.users.get(identity.id)
            return bool(user and plaintext and user.verify_password(plaintext))

    @_wrap_db_errors
    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        with self._rw_uow() as uow:
            return uow.users.set_refresh_token(user_id, token)

    @_wrap_db_errors
    def compare_and_set_refresh_token(
        self, user_id: int, *, expected: str, new: str | None
    ) -> bool:
        with self._rw_uow() as uow:
            return uow.users.compare_and_set_refresh_token(user_id, expected=expected, new=new)
