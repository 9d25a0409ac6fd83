"""Boundary adapter for the local endpoint field.

Front ends may ask for a bare port instead of a URL; the validator only knows
full URLs, so a port is turned into ``http://localhost:<port>`` here.
"""
from __future__ import annotations

from typing import Union

LOCAL_HOST = "localhost"
PORT_MIN = 1
PORT_MAX = 65535


def coerce_local_endpoint(value: Union[int, str, None]) -> str:
    """Return a local URL for a port or URL input.

    Anything that is not a bare port is returned trimmed, unchanged, for the
    validator to judge. Raises ``ValueError`` for a port outside 1..65535.
    """
    if value is None:
        return ""
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        return text
    port = int(text)
    if not PORT_MIN <= port <= PORT_MAX:
        raise ValueError(f"Port number must be between {PORT_MIN} and {PORT_MAX}.")
    return f"http://{LOCAL_HOST}:{port}"
