"""
Redirect results.

resolve() never raises; it returns one of these. The HTTP layer turns them
into responses, tests inspect them directly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    NOT_CONFIGURED = "not_configured"
    SELECTION_FAILURE = "selection_failure"
    UPSTREAM_FAILURE = "upstream_failure"


@dataclass(frozen=True)
class Redirect:
    url: str
    status_code: int = 302
    # True when the first-entry fallback picked the URL
    fallback: bool = False


@dataclass(frozen=True)
class NotFound:
    message: str
    kind: ErrorKind = ErrorKind.NOT_FOUND
    status_code: int = 404


@dataclass(frozen=True)
class ServerError:
    message: str
    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE
    status_code: int = 500


RedirectResult = Union[Redirect, NotFound, ServerError]
