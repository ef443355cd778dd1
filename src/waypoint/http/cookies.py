"""Cookie header parsing and ``Set-Cookie`` serialization.

Cookie names must be RFC 6265 tokens and values must be cookie-octets
(printable ASCII without whitespace, ``"``, ``,``, ``;`` or ``\\``).
Session ids and ``itsdangerous`` signatures are already in that set, so
nothing is escaped: an invalid value is refused rather than encoded,
which keeps a stray ``;`` from injecting cookie attributes.
"""

from dataclasses import dataclass

# RFC 7230 tchar
_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

# RFC 6265 cookie-octet: %x21 / %x23-2B / %x2D-3A / %x3C-5B / %x5D-7E
_VALUE_CHARS = frozenset(chr(c) for c in range(0x21, 0x7F)) - frozenset('",;\\')

_SAMESITE = {"lax": "Lax", "strict": "Strict", "none": "None"}


def is_cookie_name(name: str) -> bool:
    """True if *name* can be used as a cookie name."""
    return bool(name) and all(c in _TOKEN_CHARS for c in name)


def is_cookie_value(value: str) -> bool:
    """True if *value* can be sent unquoted in ``Cookie``/``Set-Cookie``."""
    return all(c in _VALUE_CHARS for c in value)


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Malformed pairs are skipped. A value wrapped in double quotes is
    unwrapped. When a name repeats, the first occurrence wins: browsers
    send the cookie with the most specific path first.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for pair in header.split(";"):
        name, sep, value = pair.strip().partition("=")
        name = name.strip()
        if not sep or not is_cookie_name(name) or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        if is_cookie_value(value):
            cookies[name] = value
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    Validated on construction: a bad name or value, an unknown
    ``samesite`` or ``SameSite=None`` without ``secure`` raises
    ``ValueError``.
    """

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "lax"

    def __post_init__(self) -> None:
        if not is_cookie_name(self.name):
            msg = f"Invalid cookie name {self.name!r}"
            raise ValueError(msg)
        if not is_cookie_value(self.value):
            msg = f"Invalid value for cookie {self.name!r}: {self.value!r}"
            raise ValueError(msg)
        for attr in (self.path, self.domain or ""):
            if ";" in attr or not attr.isprintable():
                msg = f"Invalid attribute {attr!r} for cookie {self.name!r}"
                raise ValueError(msg)
        if self.samesite is not None:
            canonical = _SAMESITE.get(self.samesite.lower())
            if canonical is None:
                msg = f"samesite must be one of 'lax', 'strict', 'none', got {self.samesite!r}"
                raise ValueError(msg)
            if canonical == "None" and not self.secure:
                msg = f"Cookie {self.name!r} with SameSite=None must also be secure"
                raise ValueError(msg)

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite is not None:
            parts.append(f"SameSite={_SAMESITE[self.samesite.lower()]}")
        return "; ".join(parts)
