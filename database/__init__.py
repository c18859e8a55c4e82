"""Persistence: engine, models and repositories."""
