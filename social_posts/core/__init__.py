"""Core Layer — request-independent building blocks: errors, registry, row mapping, response sink.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - No IO: nothing here opens a session or awaits the network
"""
