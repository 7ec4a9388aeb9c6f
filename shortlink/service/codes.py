"""
Short-code generation and URL validation helpers.

Codes:
    Cryptographically random bytes (`secrets`) -> base64 -> drop "+", "/"
    and "=" -> keep the first `length` characters. The result is drawn from
    A-Z a-z 0-9 and always has exactly `length` characters; when filtering
    leaves too few, more bytes are drawn.

URLs:
    A URL is accepted when it parses as absolute: a scheme, a hostname and,
    if present, a numeric port. Any scheme is allowed.
"""

import base64
import math
import secrets
import string
from typing import Any, Optional
from urllib.parse import urlparse

DEFAULT_CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

_DROPPED = str.maketrans("", "", "+/=")


def _safe_len(length: Optional[int]) -> int:
    """Resolve the requested code length, clamped to [4, 32]."""
    L = int(length) if length is not None else DEFAULT_CODE_LENGTH
    return max(4, min(32, L))


def generate_short_code(length: Optional[int] = None) -> str:
    """
    Generate a random short code.

    >>> len(generate_short_code(6))
    6
    """
    L = _safe_len(length)
    code = ""
    while len(code) < L:
        raw = secrets.token_bytes(math.ceil((L - len(code)) * 3 / 4) + 1)
        code += base64.b64encode(raw).decode("ascii").translate(_DROPPED)
    return code[:L]


def is_valid_url(url: Any) -> bool:
    """
    Check that `url` is a syntactically valid absolute URL.

    >>> is_valid_url("https://example.com/path?q=1")
    True
    >>> is_valid_url("not a url")
    False
    """
    if not isinstance(url, str) or not url:
        return False
    try:
        parsed = urlparse(url)
        # .port raises ValueError on a non-numeric or out-of-range port
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.hostname)
