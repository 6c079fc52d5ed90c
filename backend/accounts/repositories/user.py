"""User repository for persistence and credential utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update
from sqlalchemy.orm.util import identity_key

from accounts.models.user import User
from accounts.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never mints or decodes tokens; it only stores the refresh token value
    it is handed.
    """

    model = User

    def _updatable_fields(self):
        """Publicly allowed updatable fields (not including password or tokens)."""
        return {"email", "full_name", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive)."""
        stmt = select(User).where(User.username == username.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_username_or_email(
        self, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Fetch the user matching *either* the username or the email.

        ``None`` or blank arguments are ignored; with both missing nothing
        matches.

        :returns: First matching user or ``None``.
        :rtype: User | None
        """
        clauses = []
        if username and username.strip():
            clauses.append(User.username == username.lower().strip())
        if email and email.strip():
            clauses.append(User.email == email.lower().strip())
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, username: str, email: str) -> bool:
        return self.find_by_username_or_email(username, email) is not None

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: int, new_password: str) -> None:
        """Update a user's password and flush the session.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.flush()

    # ---------------------------- Refresh token ----------------------------

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the persisted refresh token unconditionally.

        Issued as a single ``UPDATE`` so it is atomic per row.

        :returns: ``True`` when the user row exists.
        """
        stmt = update(User).where(User.id == user_id).values(refresh_token=token)
        result = self.session.execute(stmt, execution_options={"synchronize_session": False})
        self._expire_loaded(user_id)
        return bool(result.rowcount)

    def compare_and_set_refresh_token(self, user_id: int, *, expected: str, new: str | None) -> bool:
        """Replace the refresh token only if the stored value still equals ``expected``.

        ``UPDATE users SET refresh_token=:new WHERE id=:id AND refresh_token=:expected``;
        of two concurrent callers holding the same ``expected`` exactly one
        sees a row count of 1.

        :returns: ``True`` when the swap happened.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
        )
        result = self.session.execute(stmt, execution_options={"synchronize_session": False})
        self._expire_loaded(user_id)
        return result.rowcount == 1

    def _expire_loaded(self, user_id: int) -> None:
        # Core UPDATEs bypass the identity map; drop any stale copy.
        loaded = self.session.identity_map.get(identity_key(User, user_id))
        if loaded is not None:
            self.session.expire(loaded, ["refresh_token"])
