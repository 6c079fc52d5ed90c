"""
DTOs for UserRegistrationService.

Contracts for the self-registration flow that creates a ``User`` with its
profile images.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserRegistrationIn:
    """
    Input payload for the registration process.

    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (will be normalized to lowercase+trim).
    :type email: str
    :param username: Public handle (unique, lowercased).
    :type username: str
    :param password: Raw password (the model setter hashes it).
    :type password: str
    :param avatar: Avatar image URL.
    :type avatar: str
    :param cover_image: Optional cover image URL.
    :type cover_image: str | None
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar: str
    cover_image: str | None = None
