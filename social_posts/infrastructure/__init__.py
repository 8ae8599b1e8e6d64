"""Infrastructure Layer — database sessions and logging setup.

Invariants:
    - Every SQLAlchemy failure leaves this layer as a DatabaseError
"""
