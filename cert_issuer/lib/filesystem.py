"""Filesystem helpers for the certificate output directory."""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import IssuerFilesystemError
from .logging_config import LOGGER

DIRECTORY_MODE = 0o700
KEY_FILE_MODE = 0o600
DEFAULT_FILE_MODE = 0o666


class PathState(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


@dataclass(frozen=True)
class StatResult:
    """Outcome of a stat call, tagged instead of raised."""

    state: PathState
    is_dir: bool = False
    detail: str | None = None


def stat_path(path: Path) -> StatResult:
    """Stat path and classify the outcome."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return StatResult(PathState.NOT_FOUND)
    except PermissionError as e:
        return StatResult(PathState.PERMISSION_DENIED, detail=str(e))
    except OSError as e:
        return StatResult(PathState.OTHER, detail=str(e))
    return StatResult(PathState.FOUND, is_dir=stat.S_ISDIR(st.st_mode))


def ensure_directory(path: Path) -> None:
    """Create path with owner-only permissions unless it already is a directory.

    Raises:
        IssuerFilesystemError: If path is not a directory, cannot be
            inspected, or cannot be created
    """
    result = stat_path(path)
    match result.state:
        case PathState.FOUND:
            if not result.is_dir:
                raise IssuerFilesystemError(path, "certs path exists and is not a directory")
            LOGGER.debug("certs directory already exists: %s", path)
        case PathState.NOT_FOUND:
            LOGGER.debug("creating certs directory: %s", path)
            try:
                path.mkdir(mode=DIRECTORY_MODE)
            except FileExistsError:
                # Lost a race with another creator; accept it if it is a directory
                if not path.is_dir():
                    raise IssuerFilesystemError(
                        path, "certs path exists and is not a directory"
                    ) from None
            except OSError as e:
                raise IssuerFilesystemError(
                    path, f"could not create certs directory ({e.strerror or e})"
                ) from e
        case PathState.PERMISSION_DENIED:
            raise IssuerFilesystemError(path, f"permission denied ({result.detail})")
        case PathState.OTHER:
            raise IssuerFilesystemError(path, f"could not stat certs directory ({result.detail})")


def path_exists(path: Path) -> bool:
    """Return True if anything is at path.

    Raises:
        IssuerFilesystemError: If the path cannot be inspected
    """
    result = stat_path(path)
    match result.state:
        case PathState.FOUND:
            return True
        case PathState.NOT_FOUND:
            return False
        case PathState.PERMISSION_DENIED | PathState.OTHER:
            raise IssuerFilesystemError(path, f"could not stat file ({result.detail})")


def open_exclusive(path: Path, mode: int = DEFAULT_FILE_MODE):
    """Create path atomically and return a binary file object for writing.

    The open fails with FileExistsError if anything already exists at path.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    return os.fdopen(fd, "wb")
