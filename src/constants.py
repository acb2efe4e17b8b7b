"""
Central constants for Butiki.

Update defaults and file names here.
"""

# Store
COMMANDS_FILE_NAME = ".butiki_commands.json"
DEFAULT_COMMANDS_FILE = f"~/{COMMANDS_FILE_NAME}"
STORE_FILE_MODE = 0o644
JSON_INDENT = 2

# Configuration
CONFIG_DIR_NAME = ".butiki"
CONFIG_FILE_NAME = "config.json"
CONFIG_ENV_VAR = "BUTIKI_CONFIG"
COMMANDS_FILE_ENV_VAR = "BUTIKI_COMMANDS_FILE"
LOG_LEVEL_ENV_VAR = "BUTIKI_LOG_LEVEL"

# Execution
DEFAULT_SHELL = "bash"
EDITOR_ENV_VAR = "EDITOR"
DEFAULT_EDITOR = "nano"
EDIT_TEMP_PREFIX = "butiki_edit_"
EDIT_TEMP_SUFFIX = ".txt"

# Logging
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_MAX_BYTES = 2_000_000
LOG_BACKUP_COUNT = 3
