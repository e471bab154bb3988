import asyncio
import logging
import time
from typing import List, Optional, Sequence

from .net import HttpClient
from .metrics import Metrics
from .parsing import extract_message
from .types import ErrorKind, Failure, GENERIC_FAILURE, HttpClientProtocol, QuoteResult, Success


logger = logging.getLogger(__name__)


def _generic_failure(url: str, exc: Exception, kind: ErrorKind) -> Failure:
    logger.warning("Failed to retrieve quote from %s: %r", url, exc)
    return Failure(GENERIC_FAILURE, kind)


async def _fetch_and_extract(url: str, http: HttpClientProtocol) -> QuoteResult:
    try:
        response = await http.get(url)
    except Exception as exc:
        return _generic_failure(url, exc, ErrorKind.TRANSPORT)
    # anything raised past the collaborator is a problem with the response itself
    try:
        message = extract_message(response.body)
        status = response.status
    except Exception as exc:
        return _generic_failure(url, exc, ErrorKind.PARSE)
    if status == 200:
        return Success(message)
    return Failure(message, ErrorKind.SERVER)


async def fetch_quote(url: str, http: HttpClientProtocol, metrics: Optional[Metrics] = None) -> QuoteResult:
    """Fetch one URL and turn its body into a Success or Failure.

    Never raises for per-URL problems: transport and parse errors both
    collapse into the generic failure text, tagged with their kind.
    """
    t0 = time.perf_counter()
    result = await _fetch_and_extract(url, http)
    if metrics is not None:
        metrics.record_fetch(result, (time.perf_counter() - t0) * 1000.0)
    return result


async def get_arnie_quotes(
    urls: Sequence[str],
    http_client: Optional[HttpClientProtocol] = None,
    metrics: Optional[Metrics] = None,
) -> List[QuoteResult]:
    """Fetch every URL concurrently, returning results in input order.

    There is no concurrency cap: one task is started per URL.
    """
    if not urls:
        return []
    owned: Optional[HttpClient] = None
    if http_client is None:
        owned = http_client = HttpClient()
    logger.info("Fetching %d quote URLs", len(urls))
    try:
        tasks = [asyncio.create_task(fetch_quote(url, http_client, metrics)) for url in urls]
        results = await asyncio.gather(*tasks)
    finally:
        if owned is not None:
            owned.close()
    logger.info("Finished. %d of %d quotes retrieved", sum(1 for r in results if r.ok), len(results))
    return list(results)
