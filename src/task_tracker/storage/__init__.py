"""
Storage subsystem.

Components:
- connection.py: ConnectionProvider, the single aiosqlite handle + schema setup
- record_models.py: data structures (Record, NewRecord) and time helpers
- record_store.py: SQLite-backed CRUD over the provider's handle
"""
