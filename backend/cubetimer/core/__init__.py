"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Timing is driven only by ingested timestamps (no clock reads, no threads)
    - Statistics are recomputed from the solve list, never accumulated

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
