"""HTTP client for TheLott's lotto results date-range search."""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

import httpx
import msgspec

from lottsync.common.time import end_of_day, format_wire_timestamp, start_of_day
from lottsync.logging import get_logger, log_debug, log_info
from lottsync.normalize import (
    CanonicalDraw,
    camel_case_key,
    normalize_draws,
    rekey_deep,
    rekey_shallow,
    upper_first_key,
)

from .errors import TheLottAPIError, TheLottResponseShapeError

DEFAULT_BASE_URL = "https://data.api.thelott.com"
SEARCH_REQUEST_PATH = "/sales/vmax/web/data/lotto/results/search/daterange"
COMPANY_TATTERSALLS = "Tattersalls"
PRODUCT_TATTSLOTTO = "TattsLotto"

_HTTP_ERROR_STATUS_THRESHOLD = 400

logger = get_logger(__name__)


class DrawSearchClient(typ.Protocol):
    """Interface for fetching canonical draws over a range of days."""

    async def search_draws(
        self, start_day: dt.date, end_day: dt.date | None = None
    ) -> list[CanonicalDraw]:
        """Return canonical draws between two local calendar days inclusive."""
        ...

    async def aclose(self) -> None:
        """Release any network resources."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class TheLottConfig:
    """Configuration for the TheLott results client."""

    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 20.0
    user_agent: str = "lottsync/0.1"
    company: str = COMPANY_TATTERSALLS
    product: str = PRODUCT_TATTSLOTTO

    @property
    def search_url(self) -> str:
        """Absolute URL of the date-range search endpoint."""
        return f"{self.base_url.rstrip('/')}{SEARCH_REQUEST_PATH}"


class _SearchEnvelope(msgspec.Struct):
    """Camel-cased search response; only ``draws`` is relied upon."""

    draws: list[dict[str, typ.Any]]


def build_search_request(
    start_day: dt.date,
    end_day: dt.date | None = None,
    *,
    tz: dt.tzinfo = dt.UTC,
    company: str = COMPANY_TATTERSALLS,
    product: str = PRODUCT_TATTSLOTTO,
) -> dict[str, typ.Any]:
    """Build the JSON body for a date-range search.

    The window runs from the start of ``start_day`` to the end of ``end_day``
    (``start_day`` when omitted) in ``tz``. Keys are sent with an upper-case
    first letter.

    Raises
    ------
    ValueError
        If ``end_day`` is earlier than ``start_day``.

    """
    last_day = end_day or start_day
    if last_day < start_day:
        msg = f"end day {last_day.isoformat()} is before start day {start_day.isoformat()}"
        raise ValueError(msg)

    request = {
        "companyFilter": [company],
        "productFilter": [product],
        "dateStart": format_wire_timestamp(start_of_day(start_day, tz)),
        "dateEnd": format_wire_timestamp(end_of_day(last_day, tz)),
    }
    return rekey_shallow(request, upper_first_key)


def extract_draws(body: object) -> list[dict[str, typ.Any]]:
    """Camel-case a search response and return its raw draw records."""
    rekeyed = rekey_deep(body, camel_case_key)
    try:
        envelope = msgspec.convert(rekeyed, type=_SearchEnvelope)
    except msgspec.ValidationError as exc:
        raise TheLottResponseShapeError.missing("draws") from exc
    return envelope.draws


class TheLottResultsClient:
    """httpx implementation of :class:`DrawSearchClient`."""

    def __init__(
        self,
        config: TheLottConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        tz: dt.tzinfo = dt.UTC,
    ) -> None:
        """Initialise the client; ``tz`` defines calendar days and naive dates."""
        self._config = config or TheLottConfig()
        self._tz = tz
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self._config.timeout_s,
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def search(
        self, start_day: dt.date, end_day: dt.date | None = None
    ) -> typ.Any:  # noqa: ANN401
        """POST a date-range search and return the decoded JSON body."""
        request = build_search_request(
            start_day,
            end_day,
            tz=self._tz,
            company=self._config.company,
            product=self._config.product,
        )
        log_debug(logger, "Searching %s with %r", self._config.search_url, request)
        response = await self._client.post(
            self._config.search_url,
            json=request,
            headers={"Content-Type": "application/json"},
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise TheLottAPIError.http_error(response.status_code)
        return response.json()

    async def search_draws(
        self, start_day: dt.date, end_day: dt.date | None = None
    ) -> list[CanonicalDraw]:
        """Search a date range and return canonical draws."""
        body = await self.search(start_day, end_day)
        draws = normalize_draws(extract_draws(body), default_tz=self._tz)
        log_info(
            logger,
            "Fetched %d %s draws for %s..%s",
            len(draws),
            self._config.product,
            start_day.isoformat(),
            (end_day or start_day).isoformat(),
        )
        return draws
