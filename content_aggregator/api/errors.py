"""Translation of core failures into HTTP errors."""

import logging

from fastapi import HTTPException, status

from content_aggregator.core.errors import ContentFetchError

logger = logging.getLogger(__name__)


def http_error_for_fetch_failure(error: ContentFetchError, message: str) -> HTTPException:
    """
    Map a wrapped fetch failure to an HTTP error.

    Exhausted retries and an open circuit are a temporary outage (503); an
    upstream 403/404 means the target does not exist (404); anything else is
    a bad gateway (502).
    """
    if error.is_unavailable:
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif error.status_code in (status.HTTP_403_FORBIDDEN, status.HTTP_404_NOT_FOUND):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_502_BAD_GATEWAY

    logger.error(f"{message}: {error} (responding {status_code})")
    return HTTPException(status_code=status_code, detail={"error": message, "details": str(error)})
