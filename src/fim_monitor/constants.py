"""Constants for fim-monitor."""

from enum import IntEnum

# Manifest store directory (relative to the invocation directory)
FIM_DIR = ".fim"

# Files inside FIM_DIR that are not manifest records
CONFIG_FILE = "config.yaml"
LOCK_FILE = "lock"

# Gitignore-style patterns at the working tree root
IGNORE_FILE = ".fimignore"

# Seconds to wait for another `add` to release the store
LOCK_TIMEOUT = 60

# Version
FIM_VERSION = "0.1.0"


class ExitCode(IntEnum):
    """Process exit codes, stable for scripting."""

    OK = 0
    USAGE = 2  # Same code click uses for unknown commands
    ADD_ARGS = 3
    STATUS_ARGS = 4
    INIT_ARGS = 5
    NO_REPOSITORY = 6
    REPOSITORY_EXISTS = 7
    STORE_LOCKED = 8
