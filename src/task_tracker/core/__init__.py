"""
Core types shared by storage, sync and adapters.

Components:
- errors.py: InitializationError, StorageOperationError
- ports.py: Protocols (RecordRepo, TodoExtractor, Transcriber) and listener types
- urgency.py: due-date urgency levels
- state.py: AppState (services wired by cli/bootstrap.py)
"""
