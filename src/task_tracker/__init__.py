"""
Task tracker: local persistence and reactive sync layer.

Subpackages:
- storage/: connection provider (lazy, coalesced init), Record models, record store (CRUD)
- sync/: records manager (snapshot owner, mutate -> reload -> broadcast)
- core/: errors, ports, urgency helper, AppState
- cli/ and connectors/: composition root, slash commands and the console adapter
"""
