"""factory-boy base wired to the per-test SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture hands to factories."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No factory session: request the 'session' fixture first.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        # commit only releases the test's SAVEPOINT; the outer transaction still rolls back
        sqlalchemy_session_persistence = "commit"

    @classmethod
    def _after_postgeneration(cls, instance, create, results=None):
        # persist attributes set by post_generation hooks (e.g. password hashing)
        if create and results:
            session = cls._meta.sqlalchemy_session_factory()
            if cls._meta.sqlalchemy_session_persistence == "commit":
                session.commit()
            elif cls._meta.sqlalchemy_session_persistence == "flush":
                session.flush()
