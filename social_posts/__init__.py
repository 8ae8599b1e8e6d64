"""Social Posts API — CRUD endpoints over the social.posts table.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
