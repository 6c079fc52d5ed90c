"""Self-registration of new identities."""
