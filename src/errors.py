"""
Error types for Butiki.

Every error the store, runner and configuration raise derives from
ButikiError, so CLI handlers can report any of them uniformly.
"""

from typing import Optional


class ButikiError(Exception):
    """Base class for all Butiki errors"""


class HomeDirUnresolvable(ButikiError):
    """The user's home directory cannot be determined (fatal)"""

    def __init__(self, reason: Optional[str] = None):
        message = "Could not determine home directory"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StoreReadError(ButikiError):
    """A store, import or config file could not be read"""


class StoreWriteError(ButikiError):
    """A store or export file could not be written"""


class MalformedJSON(ButikiError):
    """File content is not a valid label -> command table"""


class InvalidFormat(MalformedJSON):
    """Import file is not a valid label -> command table"""


class LabelExists(ButikiError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Label '{label}' already exists")


class LabelNotFound(ButikiError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Label '{label}' not found")


class SubprocessError(ButikiError):
    """A shell or editor process could not be launched"""


class ConfigError(ButikiError):
    """A required setting is missing or unusable"""
