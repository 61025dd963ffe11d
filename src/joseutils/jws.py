"""Compact JWT signing and verification.

:mod:`joseutils.compact` only handles the format; signatures are
computed over ``ASCII(BASE64URL(header) "." BASE64URL(payload))`` by
:class:`josepy.JWASignature` algorithms keyed by the "alg" header.

"""
import logging
from typing import Any
from typing import Mapping
from typing import Optional

import josepy as jose

from joseutils import b64
from joseutils import compact
from joseutils import constants
from joseutils import errors

logger = logging.getLogger(__name__)


def find_algorithm(name: Optional[str]) -> jose.JWASignature:
    """Find a registered signature algorithm by its "alg" name.

    :raises josepy.errors.DeserializationError: if ``name`` is missing
        or not a supported signature algorithm ("none" never is).

    """
    if name is None:
        raise jose.DeserializationError('"alg" header parameter is missing')
    try:
        return jose.JWASignature.SIGNATURES[name]
    except KeyError:
        raise jose.DeserializationError(
            'Unsupported signature algorithm: {0}'.format(name))


def sign_parts(parts: compact.PartsJWT, key: jose.JWK,
               alg: jose.JWASignature) -> compact.PartsJWT:
    """Sign unsigned parts.

    :param JWK key: Private (or symmetric) key.
    :returns: Parts with the base64url signature set.

    :raises joseutils.errors.Error: if the parts are already signed.

    """
    if parts.signature:
        raise errors.Error('JWT is already signed')
    signature = alg.sign(key.key, parts.signing_input)
    return parts.update(signature=b64.encode(signature))


def sign_compact(header: Mapping[str, Any], payload: Any, key: jose.JWK,
                 alg: jose.JWASignature,
                 codec: Optional[compact.CompactJWTCodec] = None) -> str:
    """Build and sign a compact JWT, setting "alg" in the header."""
    codec = compact.DEFAULT_CODEC if codec is None else codec
    header = dict(header)
    header[constants.HEADER_ALGORITHM] = alg.name
    return sign_parts(codec.build_unsigned(header, payload), key, alg).compact()


def verify_parts(parts: compact.PartsJWT, key: jose.JWK,
                 alg: Optional[jose.JWASignature] = None,
                 codec: Optional[compact.CompactJWTCodec] = None) -> bool:
    """Verify the signature of compact JWT parts.

    :param JWK key: Key used for verification; only its public part is
        used.
    :param alg: Expected algorithm. If ``None``, the "alg" header
        decides.

    :returns: ``False`` for unsigned parts or a wrong signature.

    :raises josepy.errors.DeserializationError: if the algorithm is
        unknown or does not work with the type of ``key``.

    """
    codec = compact.DEFAULT_CODEC if codec is None else codec
    if alg is None:
        alg = find_algorithm(codec.decode_header(parts).algorithm())
    if not isinstance(key, alg.kty):
        raise jose.DeserializationError(
            '{0} does not take a {1} key'.format(alg.name, type(key).__name__))
    if not parts.signature:
        logger.debug('Refusing to verify unsigned JWT')
        return False
    return alg.verify(key=key.public_key().key, msg=parts.signing_input,
                      sig=b64.decode(parts.signature))


def verify_compact(compact_jwt: str, key: jose.JWK,
                   alg: Optional[jose.JWASignature] = None,
                   codec: Optional[compact.CompactJWTCodec] = None) -> bool:
    """Split and verify a compact JWT."""
    return verify_parts(compact.split(compact_jwt), key, alg, codec)
