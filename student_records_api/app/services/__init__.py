"""
Service layer.

The record store hides the storage engine from the API handlers, so the
handlers can be exercised against any ``StudentStore`` implementation.
"""
