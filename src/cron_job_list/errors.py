"""Exceptions raised by cron-job-list."""


class CronJobListError(Exception):
    """Base exception for cron-job-list errors."""

    pass


class ConfigError(CronJobListError):
    """Configuration file is missing, unreadable or malformed."""

    pass


class KeyFileError(CronJobListError):
    """Private key file could not be read or parsed."""

    pass


class SSHConnectionError(CronJobListError):
    """Dialing or authenticating to a host failed."""

    pass


class ExecutionError(CronJobListError):
    """Remote command failed or its channel broke."""

    pass
