"""Services Layer — the imperative shell around the pure core.

Invariants:
    - Engines (purchase_engine, transfer_engine) never commit; the
      UnitOfWorkRunner owns commit, rollback and conflict retry
    - balance_mutator.apply_delta is the only code that writes accounts.balance

Design Decisions:
    - One module per operation for locality; shop.py is the request-level facade
"""
