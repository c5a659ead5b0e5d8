"""Shared helpers: stable hashing of shapes and reports."""
