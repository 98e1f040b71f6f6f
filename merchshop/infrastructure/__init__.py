"""Infrastructure Layer — database plumbing, security primitives, logging.

Invariants:
    - Driver and library exceptions are translated here, never leaked upward

Design Decisions:
    - Thin wrappers over SQLAlchemy, bcrypt and PyJWT keep services free of
      library-specific error handling
"""
