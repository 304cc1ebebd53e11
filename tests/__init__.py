"""
Test Suite for Finance Tracker

Test Structure:
- unit/: Unit tests mirroring the src/fintracker package layout
  (core, assets, items, ledger, auth, backup)
- integration/: Command-line and multi-service workflows against a
  temporary data directory

Every test runs against its own temporary data directory, and the
administrator seed password comes from the test environment.
"""
