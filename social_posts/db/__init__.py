"""Declarative base for the posts table."""
