"""cron-job-list: Print the crontab of many SSH hosts at once."""

__version__ = "0.0.9"

from .config import Destination, RunConfig, load_destinations
from .errors import (
    ConfigError,
    CronJobListError,
    ExecutionError,
    KeyFileError,
    SSHConnectionError,
)
from .executor import DestinationResult, DestinationStatus, Executor
from .session import RemoteSession, SessionState

__all__ = [
    "Destination",
    "RunConfig",
    "load_destinations",
    "ConfigError",
    "CronJobListError",
    "ExecutionError",
    "KeyFileError",
    "SSHConnectionError",
    "DestinationResult",
    "DestinationStatus",
    "Executor",
    "RemoteSession",
    "SessionState",
]
