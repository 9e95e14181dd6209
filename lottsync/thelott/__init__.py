"""TheLott results service client."""

from __future__ import annotations

from .client import (
    COMPANY_TATTERSALLS,
    DEFAULT_BASE_URL,
    PRODUCT_TATTSLOTTO,
    SEARCH_REQUEST_PATH,
    DrawSearchClient,
    TheLottConfig,
    TheLottResultsClient,
    build_search_request,
    extract_draws,
)
from .errors import TheLottAPIError, TheLottResponseShapeError

__all__ = [
    "COMPANY_TATTERSALLS",
    "DEFAULT_BASE_URL",
    "PRODUCT_TATTSLOTTO",
    "SEARCH_REQUEST_PATH",
    "DrawSearchClient",
    "TheLottAPIError",
    "TheLottConfig",
    "TheLottResponseShapeError",
    "TheLottResultsClient",
    "build_search_request",
    "extract_draws",
]
