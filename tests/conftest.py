"""Shared pytest configuration."""

pytest_plugins = ["clusterauth.testing.conftest"]
