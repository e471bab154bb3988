from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union


QUOTE_KEY = "Arnie Quote"
FAILURE_KEY = "FAILURE"
GENERIC_FAILURE = "Failed to retrieve quote, unexpected error"


class ErrorKind(str, Enum):
    SERVER = "server"
    TRANSPORT = "transport"
    PARSE = "parse"


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str


@dataclass(frozen=True)
class Success:
    quote: str

    @property
    def ok(self) -> bool:
        return True

    @property
    def text(self) -> str:
        return self.quote

    def to_dict(self) -> dict[str, str]:
        return {QUOTE_KEY: self.quote}


@dataclass(frozen=True)
class Failure:
    reason: str
    kind: ErrorKind = ErrorKind.SERVER

    @property
    def ok(self) -> bool:
        return False

    @property
    def text(self) -> str:
        return self.reason

    def to_dict(self) -> dict[str, str]:
        return {FAILURE_KEY: self.reason}


QuoteResult = Union[Success, Failure]


class HttpClientProtocol(Protocol):
    async def get(self, url: str) -> HttpResponse: ...
