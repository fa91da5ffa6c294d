"""
Structural validation of persisted documents.

Kept import-free so core.exceptions can depend on validation.errors.
"""
