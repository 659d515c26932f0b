# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKPOD_APP_NAME": "App display name, also the console prompt (default: taskpod).",
    "TASKPOD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Task service
    "TASKPOD_API_BASE_URL": "Base URL of the task service (default: http://localhost:8080/api).",
    "TASKPOD_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TASKPOD_READ_TIMEOUT_SECONDS": "HTTP read timeout; remote runs can be slow (default: 30).",
    # Console table
    "TASKPOD_PAGE_SIZE": "Rows per table page (default: 10).",
    # Paths (gitignored)
    "TASKPOD_DATA_DIR": "Local data directory for taskpod.log (default: .local/taskpod).",
}
