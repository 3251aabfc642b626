"""API Layer — FastAPI routes, route-guard middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes translate service results into HTTP; they hold no business rules

Design Decisions:
    - Thin routes delegate to services
"""
