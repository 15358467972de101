"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services orchestrate IO (repositories) around pure core calls
    - Business rules live in core/, never here

Design Decisions:
    - impureim sandwich: load -> pure compute -> persist
"""
