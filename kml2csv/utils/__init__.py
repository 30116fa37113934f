"""Naming and path helpers for converted outputs."""
