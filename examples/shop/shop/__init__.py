"""Toy order service used by the integration tests."""
