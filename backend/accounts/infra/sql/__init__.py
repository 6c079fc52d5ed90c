from .sqlalchemy_credential_store import SQLAlchemyCredentialStore

__all__ = ["SQLAlchemyCredentialStore"]
