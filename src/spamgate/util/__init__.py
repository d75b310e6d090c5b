"""Shared helpers (logging) used across Spamgate."""
