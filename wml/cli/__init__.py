"""Command-line interface for the WML adaptive engine."""
