import asyncio
import logging

import pytest

from quotelib.engine import fetch_quote, get_arnie_quotes
from quotelib.metrics import Metrics
from quotelib.types import ErrorKind, Failure, GENERIC_FAILURE, HttpClientProtocol, HttpResponse, Success


class StubHttp(HttpClientProtocol):
    def __init__(self, responses, delays=None):
        self.responses = responses
        self.delays = delays or {}
        self.calls = []
        self.completed = []

    async def get(self, url: str) -> HttpResponse:
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        self.completed.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
async def test_success_on_200():
    http = StubHttp({"http://x/1": HttpResponse(200, '{"message":"I\'ll be back"}')})
    results = await get_arnie_quotes(["http://x/1"], http_client=http)
    assert [r.to_dict() for r in results] == [{"Arnie Quote": "I'll be back"}]


@pytest.mark.asyncio
async def test_server_message_becomes_failure_reason():
    http = StubHttp({"http://x/2": HttpResponse(404, '{"message":"Not found"}')})
    results = await get_arnie_quotes(["http://x/2"], http_client=http)
    assert [r.to_dict() for r in results] == [{"FAILURE": "Not found"}]
    assert results[0].kind is ErrorKind.SERVER


@pytest.mark.asyncio
async def test_transport_error_is_generic_failure(caplog):
    http = StubHttp({"http://x/3": TimeoutError("timed out")})
    with caplog.at_level(logging.WARNING, logger="quotelib.engine"):
        results = await get_arnie_quotes(["http://x/3"], http_client=http)
    assert [r.to_dict() for r in results] == [{"FAILURE": "Failed to retrieve quote, unexpected error"}]
    assert results[0].kind is ErrorKind.TRANSPORT
    warnings = [rec for rec in caplog.records if rec.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "http://x/3" in warnings[0].getMessage()
    assert "timed out" in warnings[0].getMessage()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    ["", "null", "{oops", "{}", '{"message": 7}', '{"message": "   "}'],
)
@pytest.mark.parametrize("status", [200, 500])
async def test_bad_body_is_generic_parse_failure(body, status):
    http = StubHttp({"u": HttpResponse(status, body)})
    result = await fetch_quote("u", http)
    assert result == Failure(GENERIC_FAILURE, ErrorKind.PARSE)


@pytest.mark.asyncio
async def test_untrimmed_quote_is_kept():
    http = StubHttp({"u": HttpResponse(200, '{"message": " Get to the chopper! "}')})
    assert await fetch_quote("u", http) == Success(" Get to the chopper! ")


@pytest.mark.asyncio
async def test_results_keep_input_order():
    http = StubHttp(
        {
            "A": HttpResponse(200, '{"message": "a"}'),
            "B": HttpResponse(500, '{"message": "b"}'),
            "C": HttpResponse(200, '{"message": "c"}'),
        },
        delays={"A": 0.05, "B": 0.02, "C": 0.0},
    )
    results = await get_arnie_quotes(["A", "B", "C"], http_client=http)
    assert http.completed == ["C", "B", "A"]
    assert results == [Success("a"), Failure("b"), Success("c")]


@pytest.mark.asyncio
async def test_requests_are_issued_concurrently():
    urls = [f"http://x/{i}" for i in range(20)]
    http = StubHttp(
        {u: HttpResponse(200, '{"message": "ok"}') for u in urls},
        delays={u: 0.01 for u in urls},
    )
    loop = asyncio.get_running_loop()
    t0 = loop.time()
    results = await get_arnie_quotes(urls, http_client=http)
    assert loop.time() - t0 < 0.15
    assert len(results) == 20


@pytest.mark.asyncio
async def test_one_failure_does_not_abort_batch():
    http = StubHttp(
        {
            "ok": HttpResponse(200, '{"message": "fine"}'),
            "down": ConnectionError("refused"),
        }
    )
    results = await get_arnie_quotes(["down", "ok", "down"], http_client=http)
    assert [r.ok for r in results] == [False, True, False]


@pytest.mark.asyncio
async def test_empty_input_makes_no_calls():
    http = StubHttp({})
    assert await get_arnie_quotes([], http_client=http) == []
    assert http.calls == []


@pytest.mark.asyncio
async def test_batch_records_metrics():
    http = StubHttp(
        {
            "a": HttpResponse(200, '{"message": "a"}'),
            "b": HttpResponse(404, '{"message": "b"}'),
            "c": OSError("reset"),
            "d": HttpResponse(200, ""),
        }
    )
    m = Metrics()
    await get_arnie_quotes(["a", "b", "c", "d"], http_client=http, metrics=m)
    totals, elapsed = m.snapshot()
    assert totals.requests == 4
    assert totals.quotes == 1
    assert totals.failures == 3
    assert totals.errors == {ErrorKind.SERVER: 1, ErrorKind.TRANSPORT: 1, ErrorKind.PARSE: 1}
    assert totals.fetch_ms_sum >= 0
    assert elapsed > 0


class BodylessHttp(HttpClientProtocol):
    async def get(self, url: str):
        return object()


@pytest.mark.asyncio
async def test_malformed_response_object_is_parse_failure():
    result = await fetch_quote("u", BodylessHttp())
    assert result == Failure(GENERIC_FAILURE, ErrorKind.PARSE)


@pytest.mark.asyncio
async def test_deeply_nested_body_is_parse_failure():
    body = "[" * 100_000 + "]" * 100_000
    http = StubHttp({"u": HttpResponse(200, body)})
    result = await fetch_quote("u", http)
    assert result == Failure(GENERIC_FAILURE, ErrorKind.PARSE)
