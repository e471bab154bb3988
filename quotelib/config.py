from dataclasses import dataclass


DEFAULT_USER_AGENT = "quotelib/1.0 (+https://example.com; contact: quotes@example.com)"


@dataclass(frozen=True)
class QuoteConfig:
    request_timeout: float = 15.0
    connect_timeout: float = 5.0
    max_connections: int = 16
    max_redirects: int = 3
    user_agent: str = DEFAULT_USER_AGENT
