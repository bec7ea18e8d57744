"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Decides whether a response body may be compressed, based on what the
client advertises and what this server supports.

=============================================================================
HOW IT WORKS
=============================================================================

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /echo/hello HTTP/1.1                                      │
    │ Accept-Encoding: gzip, br                                     │
    │                   │     │                                     │
    │                   │     └── not supported here → dropped      │
    │                   └──────── supported → kept                  │
    └───────────────────────────────────────────────────────────────┘

    negotiate_encodings(headers) → ["gzip"]

The header value is stripped of ALL whitespace and split on commas. Each
token that exactly matches a supported token is kept, in order.

What this deliberately does NOT do:

    - q-values:   "gzip;q=0" is the token "gzip;q=0", which matches nothing
    - wildcards:  "*" matches nothing
    - case folding: "GZIP" matches nothing

The supported set includes the empty token, so "gzip," yields
["gzip", ""]. Only "gzip" changes the serialized output.

=============================================================================
"""

from typing import Iterable, List, Mapping


ACCEPT_ENCODING = "Accept-Encoding"

SUPPORTED_ENCODINGS = ("gzip", "")


def negotiate_encodings(
    headers: Mapping[str, str],
    supported: Iterable[str] = SUPPORTED_ENCODINGS,
) -> List[str]:
    """
    Intersect the client's Accept-Encoding with the supported encodings.

    Args:
        headers: Request headers (case-sensitive names).
        supported: Encoding tokens the server can produce.

    Returns:
        Accepted AND supported tokens, in client order, without duplicates.
        Empty when the header is absent or nothing matches.

    Example:
        >>> negotiate_encodings({"Accept-Encoding": "gzip, br"})
        ['gzip']
        >>> negotiate_encodings({"Accept-Encoding": "identity"})
        []
    """
    if ACCEPT_ENCODING not in headers:
        return []

    supported = set(supported)
    value = "".join(headers[ACCEPT_ENCODING].split())

    chosen: List[str] = []
    for token in value.split(","):
        if token in supported and token not in chosen:
            chosen.append(token)
    return chosen
