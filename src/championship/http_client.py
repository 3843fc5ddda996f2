"""FACEIT Data API v4 client built on httpx.

Issues GET requests only, with the caller's API key as a bearer credential.
Every non-success outcome is mapped onto the ``FaceitAPIError`` tree so the
layers above decide what a failure means: the count probe treats it as a
negative signal, page and detail retrieval let it propagate.

No retries happen here. A caller that wants a time bound or a retry policy
wraps the calls.

Usage:
    async with FaceitClient(config) as client:
        page = await client.get_collection_page(
            "championships/abc/matches", offset=0, limit=100,
        )
"""

import logging
from typing import Any

import httpx

from championship.cache import TimedCache
from championship.config import ChampionshipConfig
from championship.exceptions import (
    BadRequest,
    FaceitAPIError,
    PageNotFound,
    RateLimited,
    TransportError,
    Unauthorized,
)

logger = logging.getLogger(__name__)

# Status code -> exception class for the statuses callers distinguish
_STATUS_ERRORS: dict[int, type[FaceitAPIError]] = {
    400: BadRequest,
    401: Unauthorized,
    403: Unauthorized,
    404: PageNotFound,
    429: RateLimited,
}


class FaceitClient:
    """Async JSON client for the FACEIT Data API.

    ``transport`` is forwarded to ``httpx.AsyncClient`` so tests can plug in
    ``httpx.MockTransport`` instead of reaching the network.
    """

    def __init__(
        self,
        config: ChampionshipConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        search_cache: TimedCache | None = None,
    ):
        if config is None:
            config = ChampionshipConfig()

        self._config = config
        self._transport = transport
        self._http: httpx.AsyncClient | None = None
        self._search_cache = (
            search_cache if search_cache is not None
            else TimedCache(config.search_cache_ttl)
        )

        self._request_count = 0
        self._failure_count = 0

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    async def start(self) -> None:
        """Open the underlying connection pool. Idempotent."""
        if self._http is not None:
            return
        self._http = httpx.AsyncClient(
            base_url=self._config.api_base_url.rstrip("/") + "/",
            headers=self._headers(),
            timeout=self._config.request_timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._http is None:
            return
        await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> "FaceitClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET ``path`` relative to the API root and return the decoded body.

        Raises:
            BadRequest, Unauthorized, PageNotFound, RateLimited: for the
                matching status codes.
            FaceitAPIError: for any other non-2xx status.
            TransportError: on network failure, timeout, or a non-JSON body.
        """
        if self._http is None:
            await self.start()

        path = path.lstrip("/")
        self._request_count += 1
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            self._failure_count += 1
            raise TransportError(
                f"Request to {path} failed: {exc}", url=path
            ) from exc

        if not response.is_success:
            self._failure_count += 1
            error_cls = _STATUS_ERRORS.get(response.status_code, FaceitAPIError)
            raise error_cls(
                f"HTTP {response.status_code} for {response.url}",
                url=str(response.url),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            self._failure_count += 1
            raise TransportError(
                f"Response from {response.url} is not JSON",
                url=str(response.url),
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_collection_page(
        self, path: str, *, offset: int, limit: int
    ) -> list[dict]:
        """Return the ``items`` array of one page of a paginated collection."""
        data = await self.get_json(path, params={"offset": offset, "limit": limit})
        if not isinstance(data, dict):
            return []
        return data.get("items") or []

    async def get_match_stats(self, match_id: str) -> dict:
        # The stats endpoint rejects the "1-" prefix some match ids carry
        clean_id = match_id[2:] if match_id.startswith("1-") else match_id
        return await self.get_json(f"matches/{clean_id}/stats")

    async def get_championship(self, championship_id: str) -> dict:
        return await self.get_json(f"championships/{championship_id}")

    async def get_team(self, team_id: str) -> dict:
        return await self.get_json(f"teams/{team_id}")

    async def get_team_stats(self, team_id: str) -> dict:
        return await self.get_json(f"teams/{team_id}/stats/{self._config.game_id}")

    async def search_teams(self, nickname: str, limit: int = 20) -> list[dict]:
        """Search teams by nickname, reusing results for ``search_cache_ttl``."""
        key = (nickname.lower(), limit)
        cached = self._search_cache.get(key)
        if cached is not None:
            logger.debug("Team search cache hit for %r", nickname)
            return cached

        data = await self.get_json(
            "search/teams",
            params={"nickname": nickname, "game": self._config.game_id, "limit": limit},
        )
        items = (data.get("items") or []) if isinstance(data, dict) else []
        self._search_cache.set(key, items)
        return items

    async def verify_api_key(self) -> tuple[bool, str | None]:
        """Check the API key against the lightweight ``/games`` endpoint.

        Returns:
            ``(True, None)`` when the key works, otherwise ``(False, reason)``.
        """
        try:
            await self.get_json("games", params={"offset": 0, "limit": 1})
        except Unauthorized as exc:
            if exc.status_code == 403:
                return False, "API key lacks required permissions"
            return False, "Invalid API key"
        except TransportError:
            return False, "Network error - could not reach FACEIT API"
        except FaceitAPIError as exc:
            return False, f"API error: {exc.status_code}"
        return True, None

    def stats(self) -> dict:
        """Return request counters for end-of-run reporting."""
        total = self._request_count
        return {
            "requests": total,
            "failures": self._failure_count,
            "success_rate": ((total - self._failure_count) / total) if total else 0.0,
        }
