"""Query string parsing.

``parse_query`` follows the request's single-value model: the last
occurrence of a repeated key wins, blank values are kept.
"""

from urllib.parse import parse_qsl


def split_target(target: str) -> tuple[str, str]:
    """Split a request target into ``(path, query_string)``."""
    path, _, query_string = target.partition("?")
    return path, query_string


def parse_query(query_string: str) -> dict[str, str]:
    """Parse a raw query string into a name-value dict.

    Returns an empty dict for an empty string.
    """
    if not query_string:
        return {}
    return dict(parse_qsl(query_string, keep_blank_values=True))
