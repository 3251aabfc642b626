"""Invoice Desk Application Package — sign-in, route guard and invoice mutations.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
