import json
import threading
from pathlib import Path
from typing import Dict

from .types import QuoteResult


def result_record(url: str, result: QuoteResult) -> Dict:
    return {"url": url, "ok": result.ok, "kind": None if result.ok else result.kind.value, "result": result.to_dict()}


class JsonlWriter:
    def __init__(self, output_path: str, append: bool = False) -> None:
        self.output_path = output_path
        self._lock = threading.Lock()
        out_path = Path(self.output_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        mode = "a" if append else "w"
        self._fh = out_path.open(mode, encoding="utf-8")

    def write(self, record: Dict) -> None:
        line = json.dumps(record, ensure_ascii=False)
        with self._lock:
            self._fh.write(line + "\n")
            self._fh.flush()

    def write_result(self, url: str, result: QuoteResult) -> None:
        self.write(result_record(url, result))

    def close(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.close()

    def __enter__(self) -> "JsonlWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
