"""
IdentityService
===============

Aggregate service responsible for the authenticated user's own account:
- Profile retrieval
- Account details (full name, email)
- Password lifecycle
- Avatar and cover image URLs
"""

from __future__ import annotations

from accounts.repositories.user import UserRepository
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    violates,
)
from accounts.services.identity.dto import (
    AccountUpdateIn,
    UserPasswordChangeIn,
    UserPublicOut,
)
from sqlalchemy.exc import IntegrityError


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Retrieve user data safely.
    - Update account details ensuring email uniqueness.
    - Manage password lifecycle.
    """

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: int
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If user does not exist.
        """

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Account details
    # --------------------------------------------------------------------- #

    def update_account(self, user_id: int, dto: AccountUpdateIn) -> UserPublicOut:
        """
        Replace the user's full name and email.

        :param user_id: User identifier.
        :type user_id: int
        :param dto: Input DTO containing new values.
        :type dto: AccountUpdateIn
        :returns: Updated user DTO.
        :rtype: UserPublicOut
        :raises ServiceError: When a field is blank.
        :raises NotFoundError: When user not found.
        :raises ConflictError: When the email belongs to another user.
        """
        if not (dto.full_name or "").strip() or not (dto.email or "").strip():
            raise ServiceError("All fields are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            owner = repo.get_by_email(dto.email)
            if owner is not None and owner.id != user.id:
                raise ConflictError("User", "email already in use")

            try:
                repo.update(user, full_name=dto.full_name, email=dto.email)
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "email already in use") from exc
                raise

            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Images
    # --------------------------------------------------------------------- #

    def update_avatar(self, user_id: int, url: str) -> UserPublicOut:
        """Point the avatar at a new image URL."""
        if not (url or "").strip():
            raise ServiceError("Avatar file is missing")
        return self._update_image(user_id, avatar=url.strip())

    def update_cover_image(self, user_id: int, url: str) -> UserPublicOut:
        """Point the cover image at a new image URL."""
        if not (url or "").strip():
            raise ServiceError("Cover image file is missing")
        return self._update_image(user_id, cover_image=url.strip())

    def _update_image(self, user_id: int, **fields: str) -> UserPublicOut:
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            repo.update(user, **fields)
            return UserPublicOut.from_model(user)

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, dto: UserPasswordChangeIn) -> None:
        """
        Change a user's password after verifying the old one.

        The persisted refresh token is left untouched.

        :param dto: Input DTO containing old and new passwords.
        :type dto: UserPasswordChangeIn
        :raises NotFoundError: When user not found.
        :raises ServiceError: When old password verification fails.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)

            if not user.verify_password(dto.old_password):
                raise ServiceError("Invalid old password")

            try:
                repo.update_password(dto.user_id, dto.new_password)
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
