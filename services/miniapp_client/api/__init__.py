"""Typed wrappers for the forum backend endpoints."""
