from __future__ import annotations

import hmac
import threading
from dataclasses import dataclass, replace
from typing import Protocol

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Read-model of a user record as seen by the token core.

    The password hash is intentionally absent: only the store can check it.

    :ivar id: Immutable identity id.
    :ivar username: Lowercased handle.
    :ivar email: Lowercased email.
    :ivar refresh_token: Currently persisted refresh token, if any.
    """

    id: int
    username: str
    email: str
    refresh_token: str | None = None


class CredentialStore(Protocol):
    """
    Holds user records with a hashed password and one refresh token each.

    Writes to the refresh token MUST be atomic per record. Adapters raise
    :class:`~accounts.services._shared.errors.CredentialStoreError` when the
    backing store fails.
    """

    def find_by_id(self, user_id: int) -> Identity | None: ...

    def find_by_username_or_email(
        self, username: str | None, email: str | None
    ) -> Identity | None: ...

    def verify_password(self, identity: Identity, plaintext: str) -> bool: ...

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Unconditionally overwrite (or clear) the refresh token. :returns: record existed."""

    def compare_and_set_refresh_token(
        self, user_id: int, *, expected: str, new: str | None
    ) -> bool:
        """Swap the refresh token only if it still equals ``expected``."""


@dataclass(frozen=True)
class _Record:
    identity: Identity
    password_hash: str


class InMemoryCredentialStore(CredentialStore):
    """
    Dictionary-backed credential store.

    .. note::
       A single lock makes every write, including the compare-and-set,
       atomic across threads.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, _Record] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def add_user(self, *, username: str, email: str, password: str) -> Identity:
        """Create a record (test/seed helper; not part of the port)."""
        with self._lock:
            self._seq += 1
            identity = Identity(
                id=self._seq,
                username=username.strip().lower(),
                email=email.strip().lower(),
            )
            self._by_id[identity.id] = _Record(identity, generate_password_hash(password))
            return identity

    def delete_user(self, user_id: int) -> None:
        with self._lock:
            self._by_id.pop(user_id, None)

    # -------------------------- API ----------------------------

    def find_by_id(self, user_id: int) -> Identity | None:
        with self._lock:
            rec = self._by_id.get(user_id)
        return rec.identity if rec else None

    def find_by_username_or_email(
        self, username: str | None, email: str | None
    ) -> Identity | None:
        uname = (username or "").strip().lower()
        mail = (email or "").strip().lower()
        with self._lock:
            records = sorted(self._by_id.values(), key=lambda r: r.identity.id)
        for rec in records:
            if (uname and rec.identity.username == uname) or (
                mail and rec.identity.email == mail
            ):
                return rec.identity
        return None

    def verify_password(self, identity: Identity, plaintext: str) -> bool:
        with self._lock:
            rec = self._by_id.get(identity.id)
        if rec is None or not plaintext:
            return False
        return check_password_hash(rec.password_hash, plaintext)

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        with self._lock:
            rec = self._by_id.get(user_id)
            if rec is None:
                return False
            self._by_id[user_id] = _Record(
                replace(rec.identity, refresh_token=token), rec.password_hash
            )
            return True

    def compare_and_set_refresh_token(
        self, user_id: int, *, expected: str, new: str | None
    ) -> bool:
        with self._lock:
            rec = self._by_id.get(user_id)
            current = rec.identity.refresh_token if rec else None
            if rec is None or current is None:
                return False
            if not hmac.compare_digest(current.encode(), expected.encode()):
                return False
            self._by_id[user_id] = _Record(
                replace(rec.identity, refresh_token=new), rec.password_hash
            )
            return True
