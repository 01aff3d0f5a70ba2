"""Services Layer - stateful orchestration around the pure core.

Invariants:
    - Services receive their store through the constructor (no globals)
    - Business rules come from core/; services sequence IO around them
"""
