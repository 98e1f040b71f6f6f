"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire names are camelCase (toUser, coinHistory); Python names are snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Amount/quantity positivity is NOT validated here: the engines own that rule
      and report it as a typed error
"""
