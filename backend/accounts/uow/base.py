"""Transactional boundary contract shared by the account services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from accounts.repositories import UserRepository


class UnitOfWork(ABC):
    """
    One use-case's view of the ``users`` table.

    Implementations expose :attr:`users` bound to a single session; the
    read-write flavour commits when the ``with`` block exits cleanly, the
    read-only flavour refuses to write at all.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
