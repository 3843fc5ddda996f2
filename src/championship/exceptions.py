"""Custom exception hierarchy for championship ingestion.

Exception tree:
    ChampionshipError
    +-- FaceitAPIError          (any non-success API interaction)
    |   +-- BadRequest          (HTTP 400, e.g. offset past the collection end)
    |   +-- Unauthorized        (HTTP 401/403)
    |   +-- PageNotFound        (HTTP 404)
    |   +-- RateLimited         (HTTP 429)
    |   +-- TransportError      (network failure, timeout, undecodable body)
    +-- ConfigError             (championship registry / configuration)
    +-- UnsupportedFormatError  (export payload with unknown version or shape)
"""

from typing import Optional


class ChampionshipError(Exception):
    """Base exception for all championship ingestion errors."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class FaceitAPIError(ChampionshipError):
    """The FACEIT Data API did not return a usable response.

    During count discovery these only steer the binary search. During page
    or detail retrieval they abort the call.
    """

    pass


class BadRequest(FaceitAPIError):
    """HTTP 400 -- FACEIT answers this when the offset exceeds the collection."""

    pass


class Unauthorized(FaceitAPIError):
    """HTTP 401/403 -- the API key is missing, invalid, or lacks permissions."""

    pass


class PageNotFound(FaceitAPIError):
    """HTTP 404 -- the requested resource does not exist.

    Distinct from FaceitAPIError so callers can treat missing match stats
    (not yet published) as absent rather than as a failure.
    """

    pass


class RateLimited(FaceitAPIError):
    """HTTP 429 Too Many Requests."""

    pass


class TransportError(FaceitAPIError):
    """Network error, timeout, or a response body that is not JSON."""

    pass


class ConfigError(ChampionshipError):
    """Championship registry could not be loaded or queried."""

    pass


class UnsupportedFormatError(ChampionshipError):
    """Export payload has an unknown version or an unexpected shape.

    Raised instead of guessing a schema so a stale or foreign file never
    loads as a silently wrong database.
    """

    pass
