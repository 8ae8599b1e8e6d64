"""Services Layer — the post endpoint handlers."""
