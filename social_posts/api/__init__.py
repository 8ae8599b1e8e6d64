"""API Layer — the session-scoped dispatcher every request passes through.

Invariants:
    - One catch-all route in main.py hands requests to the dispatcher
    - Endpoint handlers live in services/, registered explicitly

Design Decisions:
    - Thin shell: routing, session lifecycle and the 500 path only
"""
