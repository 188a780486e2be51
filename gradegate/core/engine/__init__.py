"""Core grade computation and delinquency evaluation.

Responsibilities:
  - Expose one entry point for tier-aware aggregation and delinquency evaluation.
  - Must not read storage directly; consumes already-fetched components and ledgers.
"""
