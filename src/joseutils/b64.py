"""Strict JOSE Base64.

:func:`josepy.b64decode` silently skips characters outside of the
URL-safe alphabet. Compact tokens are an external format, so segments
are checked against the RFC 4648 section 5 alphabet (no padding) first.

"""
import re

import josepy as jose

_SEGMENT = re.compile(r'\A[A-Za-z0-9_-]*\Z')


def encode(data: bytes) -> str:
    """Encode bytes as an unpadded base64url string."""
    return jose.encode_b64jose(data)


def decode(data: str) -> bytes:
    """Decode an unpadded base64url string.

    :raises josepy.errors.DeserializationError: if ``data`` contains
        characters outside of the base64url alphabet (including ``=``
        padding) or has an impossible length.

    """
    if not isinstance(data, str) or not _SEGMENT.match(data):
        raise jose.DeserializationError(
            'Invalid base64url segment: {0!r}'.format(data))
    return jose.decode_b64jose(data)
