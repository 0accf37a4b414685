"""
Test Suite for fingrab

Test Structure:
- fixtures/: Fake bank API and shared helpers
- unit/: Unit tests mirroring src/ package structure
- integration/: End-to-end CLI tests

Test Data:
All account ids, transactions and tokens are synthetic. Tests never talk to
a real bank API.
"""
