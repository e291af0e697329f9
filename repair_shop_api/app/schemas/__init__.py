"""
Pydantic schema definitions for API payloads.

Service tickets and inventory items each define their own request and
response models.  Schemas are separated from the SQLite rows so that
the JSON representation (camelCase field names) is decoupled from the
column names used by the store.
"""
