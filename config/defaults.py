"""Default pipeline settings."""

DEFAULTS = {
    "max_repair_attempts": 3,
    "request_timeout": 120,             # seconds per provider call
    "temperature": 0.5,
    "min_response_length": 50,          # shorter responses are treated as truncated
    "max_existing_files_in_prompt": 8,
    "existing_file_truncate": 1500,     # chars per existing file sent as context
    "history_messages": 4,              # trailing conversation turns sent to the coder
    "max_files_per_generation": 20,
    "max_file_size_bytes": 100_000,
    "critical_penalty": 0.15,
    "warning_penalty": 0.05,
    "jsx_imbalance_tolerance": 5,
    "log_level": "INFO",
}
