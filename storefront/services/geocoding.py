"""Geocoding service backed by the OpenCage JSON API.

Resolves shopper-entered location text into candidate addresses with
coordinates. Provider failures never propagate past this module: they are
logged and turned into an empty lookup carrying a user-facing notice.
"""

import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from ..config import GeocodingConfig
from ..errors import GeocodingProviderError
from ..messages import (
    GEOCODING_NOT_CONFIGURED,
    GEOCODING_RATE_LIMITED,
    GEOCODING_TIMEOUT,
    GEOCODING_UNAVAILABLE,
)
from ..models import AddressComponents, Coordinates, GeocodeLookup, GeocodeResult
from ..utils import create_session

logger = logging.getLogger(__name__)

# OpenCage answers 402 when the daily quota is used up and 429 when throttling.
RATE_LIMIT_STATUSES = {402, 429}


def parse_results(payload: dict[str, Any]) -> tuple[GeocodeResult, ...]:
    """Convert a provider payload into candidates.

    Candidates lacking a usable coordinate pair are dropped. Provider order is
    preserved.

    Args:
        payload: Decoded JSON body from the provider.

    Returns:
        Tuple of GeocodeResult in provider order.
    """
    candidates: list[GeocodeResult] = []

    for raw in payload.get("results") or []:
        if not isinstance(raw, dict):
            continue

        geometry = raw.get("geometry") or {}
        if "lat" not in geometry or "lng" not in geometry:
            logger.debug(f"Dropping candidate without geometry: {raw.get('formatted')!r}")
            continue

        try:
            candidates.append(
                GeocodeResult(
                    formatted_address=raw.get("formatted") or "",
                    coordinates=Coordinates(lat=geometry["lat"], lng=geometry["lng"]),
                    components=AddressComponents.model_validate(raw.get("components") or {}),
                )
            )
        except ValidationError as e:
            logger.debug(f"Dropping malformed candidate {raw.get('formatted')!r}: {e}")

    return tuple(candidates)


class GeocodingService:
    """OpenCage forward geocoding client scoped to one country."""

    def __init__(
        self,
        config: GeocodingConfig,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the geocoding client.

        Args:
            config: Provider settings.
            session: Shared HTTP session. When omitted a short-lived session
                is opened for each lookup.
        """
        self.config = config
        self._session = session

        if not config.api_key:
            logger.warning("OPENCAGE_API_KEY is not set. Geocoding service will be unavailable.")

    @property
    def available(self) -> bool:
        return bool(self.config.api_key)

    def build_query(self, query: str) -> str:
        """Append the configured country hint to the shopper's text."""
        text = query.strip()
        if self.config.country_hint:
            return f"{text}, {self.config.country_hint}"
        return text

    def _build_params(self, query: str) -> dict[str, str | int]:
        return {
            "q": self.build_query(query),
            "key": self.config.api_key or "",
            "countrycode": self.config.country_code,
            "limit": self.config.result_limit,
            "language": self.config.language,
            "no_annotations": 1,
        }

    async def lookup(self, query: str) -> GeocodeLookup:
        """Look up candidate locations for free-text input.

        Args:
            query: Text typed by the shopper.

        Returns:
            GeocodeLookup with candidates in provider order. Empty when the
            query is blank (no request is made) or the provider failed, in
            which case ``notice`` is set.
        """
        query = query or ""
        if not query.strip():
            return GeocodeLookup(query=query)

        if not self.available:
            return GeocodeLookup(query=query, notice=GEOCODING_NOT_CONFIGURED)

        params = self._build_params(query)
        try:
            logger.debug(f"Geocoding '{params['q']}' (country={self.config.country_code})")
            payload = await self._fetch(params)
        except GeocodingProviderError as e:
            logger.warning(f"Geocoding provider error for '{query}': {e} {e.body[:200]}")
            notice = GEOCODING_RATE_LIMITED if e.status in RATE_LIMIT_STATUSES else GEOCODING_UNAVAILABLE
            return GeocodeLookup(query=query, notice=notice)
        except asyncio.TimeoutError:
            logger.warning(f"Geocoding timed out for '{query}'")
            return GeocodeLookup(query=query, notice=GEOCODING_TIMEOUT)
        except aiohttp.ClientError as e:
            logger.warning(f"Geocoding request failed for '{query}': {e}")
            return GeocodeLookup(query=query, notice=GEOCODING_UNAVAILABLE)
        except Exception as e:
            logger.error(f"Geocoding unexpected error for '{query}': {e}", exc_info=True)
            return GeocodeLookup(query=query, notice=GEOCODING_UNAVAILABLE)

        if not isinstance(payload, dict):
            logger.warning(f"Geocoding returned a non-object payload for '{query}'")
            return GeocodeLookup(query=query, notice=GEOCODING_UNAVAILABLE)

        results = parse_results(payload)
        logger.debug(f"Geocoding '{query}' returned {len(results)} candidate(s)")
        return GeocodeLookup(query=query, results=results)

    async def _fetch(self, params: dict[str, str | int]) -> Any:
        """Perform the provider request and decode the JSON body."""
        if self._session is not None:
            return await self._request(self._session, params)

        async with create_session(self.config.timeout) as session:
            return await self._request(session, params)

    async def _request(
        self, session: aiohttp.ClientSession, params: dict[str, str | int]
    ) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with session.get(self.config.base_url, params=params, timeout=timeout) as response:
            if response.status != 200:
                body = await response.text()
                raise GeocodingProviderError(response.status, body)
            return await response.json(content_type=None)
