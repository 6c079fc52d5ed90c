"""Account management for the authenticated user."""
