"""Canned provider payloads used by unit and integration tests."""
