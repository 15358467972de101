"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Core enums serialized by value ("+2", "dnf", "ready_hold")

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
