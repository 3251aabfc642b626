"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services receive their DB session and cache as arguments (no ambient state)
    - Credential verification returns Identity | None; mutations return MutationOutcome

Design Decisions:
    - One module per responsibility: lookup, verification, mutation, effects, queries
"""
