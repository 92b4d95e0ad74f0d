"""Adapters binding the domain ports to HTTP services and SQL storage."""
