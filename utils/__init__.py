"""Shared helpers with no database or framework dependencies."""
