"""MerchShop Application Package — coin balances, transfers and merchandise purchases.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
