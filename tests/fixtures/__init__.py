"""
Test Fixtures and Utilities

Builders for transactions and orders, a recording ledger updater and helpers
for writing input files. All test data is synthetic.
"""
