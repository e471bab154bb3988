import json
from typing import Optional


# ECMAScript WhiteSpace and LineTerminator, the set String.prototype.trim removes
JS_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


class ParseError(ValueError):
    pass


def extract_message(json_text: Optional[str]) -> str:
    """Return the ``message`` string of a JSON object body.

    Raises ParseError when the body is empty, is not valid JSON, or carries
    no non-blank string ``message``. The returned value is not stripped.
    """
    if not json_text:
        raise ParseError("Input JSON is undefined or empty")
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ParseError(str(exc)) from exc
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, str) or not message.strip(JS_WHITESPACE):
        raise ParseError("Invalid message format or empty message")
    return message
