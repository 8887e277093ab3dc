"""
Test Suite for the Reconciler

Test Structure:
- fixtures/: Record builders and test doubles
- unit/: Unit tests mirroring the src/reconciler package structure
- integration/: Configuration, CLI and end-to-end workflow tests

All test data is synthetic.
"""
