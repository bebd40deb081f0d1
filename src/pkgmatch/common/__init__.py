"""Shared helpers used across pkgmatch modules."""
