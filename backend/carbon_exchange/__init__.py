"""Carbon Exchange - carbon-credit trading backend (catalog, balances, trade ledger).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
