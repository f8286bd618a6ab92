"""Exception types raised by graph commands."""

from __future__ import annotations


class GraphCommandError(Exception):
    """Base class for every error this package raises."""


class MissingTargetError(GraphCommandError):
    """A required target was not supplied at all."""


class UnresolvableTargetError(GraphCommandError):
    """A target was supplied but is not a link, a record or a name."""


class ParameterError(GraphCommandError):
    """Conflicting or invalid switches passed to a command."""


class AmbiguousMimeTypeError(GraphCommandError):
    """No MIME type was given and none could be guessed from the file name."""


class TransportError(GraphCommandError):
    """A Graph request failed with anything other than 404."""

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.url = url


class NotFoundError(TransportError):
    """The Graph resource does not exist (HTTP 404)."""

    def __init__(self, url: str, message: str = "Resource not found"):
        super().__init__(f"{message}: {url}", status=404, url=url)
