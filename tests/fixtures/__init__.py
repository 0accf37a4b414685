"""
Test Fixtures and Utilities

- fake_api: In-memory bank API served through httpx.MockTransport
"""
