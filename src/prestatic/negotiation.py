"""Accept-Encoding negotiation.

Picks one variant of an asset from what the client accepts:

1. Compression disabled -> identity, always
2. Parse the header into token -> weight (``q``, default 1.0)
3. Effective weight per variant: exact token, else ``*``, else an
   implicit 1.0 for identity, else 0
4. Drop weight-0 variants
5. Highest weight wins; ties go to the server's ``order_preference``,
   then to discovery order. Implicit identity only wins when nothing
   the client named is acceptable
6. Nothing left -> ``NoAcceptableEncoding``

Pure: identical inputs always produce identical outputs.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from prestatic.encodings import IDENTITY, CompressionVariant
from prestatic.errors import NoAcceptableEncoding

WILDCARD = "*"

# Tokens that name the same coding
_TOKEN_ALIASES: dict[str, str] = {
    "x-gzip": "gzip",
    "x-compress": "compress",
}


@dataclass(frozen=True, slots=True)
class NegotiationOutcome:
    """The chosen variant.

    ``is_fallback`` is True when identity was served because no
    compressed variant satisfied the client and the client never named
    identity, directly or through ``*``. Identity the client asked for
    (``identity;q=0.5, gzip;q=0``) is a preference, not a fallback.
    """

    variant: CompressionVariant
    is_fallback: bool = False


def _parse_part(part: str) -> tuple[str, float] | None:
    """Parse one ``token;q=0.8`` element. None for empty or malformed parts."""
    token, *params = part.split(";")
    token = token.strip().lower()
    if not token:
        return None
    token = _TOKEN_ALIASES.get(token, token)

    weight = 1.0
    for param in params:
        name, _, value = param.strip().partition("=")
        if name.strip().lower() != "q":
            continue
        try:
            weight = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(weight):
            return None
        break

    return token, min(max(weight, 0.0), 1.0)


@lru_cache(maxsize=256)
def _parse_cached(header: str) -> Mapping[str, float]:
    weights: dict[str, float] = {}
    for part in header.split(","):
        parsed = _parse_part(part)
        if parsed is None:
            continue
        token, weight = parsed
        if token not in weights or weight > weights[token]:
            weights[token] = weight
    return MappingProxyType(weights)


def parse_accept_encoding(header: str | None) -> Mapping[str, float]:
    """Parse an ``Accept-Encoding`` value into token -> weight.

    Tokens are lowercased; repeated tokens keep their highest weight.
    Weight 0 means the client refuses that coding (or, for ``*``,
    everything it did not list).

    >>> dict(parse_accept_encoding("gzip;q=0.5, br"))
    {'gzip': 0.5, 'br': 1.0}
    """
    if not header:
        return MappingProxyType({})
    return _parse_cached(header)


def client_weight(variant: CompressionVariant, accepted: Mapping[str, float]) -> tuple[float, bool]:
    """Effective weight of *variant*, and whether it was implicit."""
    token = variant.token
    if token in accepted:
        return accepted[token], False
    if WILDCARD in accepted:
        return accepted[WILDCARD], False
    if variant.is_identity:
        return 1.0, True
    return 0.0, False


def _preference_rank(variant: CompressionVariant, order_preference: Sequence[str]) -> int:
    names = (variant.encoding_name.lower(), variant.token)
    for rank, name in enumerate(order_preference):
        if name in names:
            return rank
    return len(order_preference)


def negotiate(
    accept_encoding: str | None,
    variants: Sequence[CompressionVariant],
    *,
    disable_compression: bool = False,
    order_preference: Sequence[str] = (),
) -> NegotiationOutcome:
    """Select one of *variants* for a client sending *accept_encoding*.

    Args:
        accept_encoding: Raw header value; None or empty when absent.
        variants: The asset's variants in discovery order.
        disable_compression: Serve identity regardless of the header.
        order_preference: Server preference among equal weights, by
            encoding name (``"identity"`` or ``"none"`` for identity).

    Raises:
        NoAcceptableEncoding: No variant, identity included, is acceptable.
    """
    if disable_compression:
        return NegotiationOutcome(IDENTITY)

    accepted = parse_accept_encoding(accept_encoding)

    best: tuple[bool, float, int, int] | None = None
    chosen: NegotiationOutcome | None = None
    for position, variant in enumerate(variants):
        weight, implicit = client_weight(variant, accepted)
        if weight <= 0.0:
            continue
        # Named before implicit, then higher weight, preference rank, discovery order
        score = (implicit, -weight, _preference_rank(variant, order_preference), position)
        if best is None or score < best:
            best = score
            chosen = NegotiationOutcome(variant, is_fallback=implicit)

    if chosen is None:
        raise NoAcceptableEncoding(accept_encoding, tuple(v.encoding_name for v in variants))
    return chosen
