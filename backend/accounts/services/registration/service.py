"""
UserRegistrationService
=======================

Process-level service that registers a new identity:

- Rejects a username or email that is already taken.
- Creates the ``User`` in a single transaction with no refresh token.
- Maps unique-constraint races to :class:`ConflictError`.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from accounts.repositories.user import UserRepository
from accounts.services._shared.base import BaseService
from accounts.services._shared.errors import ConflictError, ServiceError, violates
from accounts.services.identity.dto import UserPublicOut
from accounts.services.registration.dto import UserRegistrationIn

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "username or email already in use"


class UserRegistrationService(BaseService):
    """
    Orchestrates the user registration process.
    """

    def register(self, dto: UserRegistrationIn) -> UserPublicOut:
        """
        Register a user.

        :param dto: Registration input.
        :type dto: :class:`UserRegistrationIn`
        :returns: Public-safe payload of the created user.
        :rtype: :class:`UserPublicOut`
        :raises ServiceError: When a required field is blank or invalid.
        :raises ConflictError: When the username or email already exists.
        """
        required = (dto.full_name, dto.email, dto.username, dto.password, dto.avatar)
        if any(not (value or "").strip() for value in required):
            raise ServiceError("All fields are required")

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_username_or_email(dto.username, dto.email):
                    raise ConflictError("User", DUPLICATE_MESSAGE)

                try:
                    user = repo.model(
                        full_name=dto.full_name,
                        email=dto.email,
                        username=dto.username,
                        password=dto.password,  # model setter hashes
                        avatar=dto.avatar,
                        cover_image=dto.cover_image or None,
                    )
                except ValueError as exc:
                    raise ServiceError(str(exc)) from exc
                repo.add(user)
                result = UserPublicOut.from_model(user)
        except IntegrityError as exc:
            # Concurrent registration won the unique constraint
            if violates(exc, "uq_users_email") or violates(exc, "uq_users_username"):
                raise ConflictError("User", DUPLICATE_MESSAGE) from exc
            raise

        logger.info("user.registered", extra={"identity_id": result.id})
        return result
