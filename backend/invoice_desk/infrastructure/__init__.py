"""Infrastructure Layer — database, hashing, tokens, caching and logging.

Invariants:
    - Infrastructure holds every IO and crypto dependency (SQLAlchemy, bcrypt, PyJWT)
    - Configuration values arrive as arguments; modules here do not read settings

Design Decisions:
    - One module per external concern: each can be swapped or faked in tests alone
"""
