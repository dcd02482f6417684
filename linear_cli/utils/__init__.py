"""Shared helpers: logging setup and the on-disk response cache."""
