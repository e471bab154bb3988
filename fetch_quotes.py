#!/usr/bin/env python3
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from quotelib.config import QuoteConfig, DEFAULT_USER_AGENT
from quotelib.engine import get_arnie_quotes
from quotelib.metrics import Metrics
from quotelib.net import HttpClient
from quotelib.prometheus_exporter import PrometheusExporter
from quotelib.storage import JsonlWriter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch Arnie quotes from JSON endpoints.")
    parser.add_argument("urls", nargs="*", help="Quote URLs to fetch.")
    parser.add_argument("--file", dest="url_file", default=None, help="File with one URL per line.")
    parser.add_argument("--timeout", type=float, default=15.0, help="HTTP read timeout in seconds.")
    parser.add_argument("--connect-timeout", type=float, default=5.0, help="HTTP connect timeout in seconds.")
    parser.add_argument("--max-connections", type=int, default=16, help="Max connections per pool for HTTP client.")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send.")
    parser.add_argument("--out", dest="output_path", default=None, help="Path to JSONL output file.")
    parser.add_argument(
        "--prometheus-textfile", default=None, help="Write batch metrics to this file in Prometheus text format."
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    args = parser.parse_args(argv)
    if args.url_file:
        try:
            args.urls = list(args.urls) + read_url_file(args.url_file)
        except OSError as exc:
            parser.error(f"cannot read URL file {args.url_file}: {exc.strerror or exc}")
    if not args.urls:
        parser.error("no URLs given (pass them as arguments or with --file)")
    return args


def read_url_file(path: str) -> List[str]:
    urls = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                urls.append(line)
    return urls


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    config = QuoteConfig(
        request_timeout=max(1.0, args.timeout),
        connect_timeout=max(0.5, args.connect_timeout),
        max_connections=max(1, args.max_connections),
        user_agent=args.user_agent,
    )
    http = HttpClient(config)
    metrics = Metrics()
    try:
        results = asyncio.run(get_arnie_quotes(args.urls, http_client=http, metrics=metrics))
    finally:
        http.close()

    if args.output_path:
        with JsonlWriter(args.output_path) as writer:
            for url, result in zip(args.urls, results):
                writer.write_result(url, result)
    if args.prometheus_textfile:
        PrometheusExporter(metrics).write(args.prometheus_textfile)

    json.dump([r.to_dict() for r in results], sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
