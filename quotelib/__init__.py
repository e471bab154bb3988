from .engine import fetch_quote, get_arnie_quotes
from .types import ErrorKind, Failure, HttpResponse, QuoteResult, Success

__all__ = [
    "ErrorKind",
    "Failure",
    "HttpResponse",
    "QuoteResult",
    "Success",
    "fetch_quote",
    "get_arnie_quotes",
]
