class OptionBackupError(Exception):
    """Base class for errors reported to the operator."""


class OptionNotSpecified(OptionBackupError):
    def __init__(self, message: str = "Option name not specified."):
        super().__init__(message)


class BackupNotFound(OptionBackupError):
    """No snapshot history for an option, or no snapshot for the requested time key."""

    @classmethod
    def no_history(cls, name: str) -> "BackupNotFound":
        return cls(f"Option {name} not specified.")

    @classmethod
    def no_time_key(cls) -> "BackupNotFound":
        return cls("Specified backup time_key not found.")
