"""Core: configuration, clock, errors, DTOs and messages."""
