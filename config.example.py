# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file,
read by python-dotenv when it is installed). See src/task_tracker/config.py.

Every variable is optional; an empty environment gives a working local setup under .local/tasks.
"""

ENV_VARS = {
    # App / logging
    "TASKS_APP_NAME": "App display name used in log lines (default: tasks).",
    "TASKS_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKS_CONSOLE_ENABLED": (
        "Run the interactive console (true/false, default: true). "
        "When false the app opens the database, loads once and exits."
    ),
    # Paths (gitignored)
    "TASKS_DATA_DIR": "Local data directory; also holds tasks.log (default: .local/tasks).",
    "TASKS_DB_PATH": "SQLite database path (default: <data_dir>/app_database.db).",
    # Storage timeouts (seconds; non-positive or unparsable values fall back to the default)
    "TASKS_DB_TIMEOUT_SECONDS": "SQLite busy timeout when opening the database (default: 30).",
    "TASKS_OP_TIMEOUT_SECONDS": "Upper bound for a single storage statement (default: 10).",
}
