"""
Sync subsystem.

Components:
- records_manager.py: RecordsManager, the in-memory snapshot and its subscribers
"""
