"""JWT Compact Serialization.

A compact JWT is ``BASE64URL(header) "." BASE64URL(payload) "."
BASE64URL(signature)`` (RFC 7515, section 7.1), all segments being
unpadded base64url. A token that has not been signed yet keeps the
trailing separator and an empty third segment.

When the header carries ``"zip": "DEF"`` the payload is compressed with
raw DEFLATE (RFC 1951, no zlib or gzip framing) before it is encoded.

"""
import json
import logging
import zlib
from typing import Any
from typing import Callable
from typing import Dict
from typing import Mapping
from typing import Optional
from typing import Tuple

import josepy as jose

from joseutils import b64
from joseutils import constants
from joseutils import errors
from joseutils.claims import PayloadClaims
from joseutils.headers import Headers

logger = logging.getLogger(__name__)

JSONDumps = Callable[[Any], bytes]
JSONLoads = Callable[[bytes], Any]


def dumps_canonical(value: Any) -> bytes:
    """Dump to compact, key-sorted UTF-8 JSON.

    :class:`josepy.JSONDeSerializable` objects are partially serialized
    on the way.

    """
    return json.dumps(value, default=jose.JSONDeSerializable.json_dump_default,
                      separators=(',', ':'), sort_keys=True,
                      ensure_ascii=False).encode('utf-8')


def deflate(data: bytes) -> bytes:
    """Raw DEFLATE at maximum compression level."""
    compressor = zlib.compressobj(
        constants.DEFLATE_LEVEL, zlib.DEFLATED, constants.DEFLATE_WBITS)
    return compressor.compress(data) + compressor.flush()


def inflate(data: bytes) -> bytes:
    """Inflate a complete raw DEFLATE stream.

    :raises joseutils.errors.DecompressionError: if the stream is
        corrupted, truncated or followed by trailing data.

    """
    decompressor = zlib.decompressobj(constants.DEFLATE_WBITS)
    try:
        inflated = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as error:
        raise errors.DecompressionError(error)
    if not decompressor.eof:
        raise errors.DecompressionError('Truncated DEFLATE stream')
    if decompressor.unused_data:
        raise errors.DecompressionError('Trailing data after DEFLATE stream')
    return inflated


class PartsJWT(jose.ImmutableMap):
    """Base64url encoded segments of a compact JWT.

    :ivar str header: Protected header segment.
    :ivar str payload: Payload segment (possibly compressed).
    :ivar signature: Signature segment, ``None`` until the token is signed.

    """
    __slots__ = ('header', 'payload', 'signature')

    def __init__(self, header: str, payload: str,
                 signature: Optional[str] = None) -> None:
        super().__init__(header=header, payload=payload, signature=signature)

    @property
    def signing_input(self) -> bytes:
        """ASCII(BASE64URL(header) "." BASE64URL(payload))."""
        return (self.header + '.' + self.payload).encode('ascii')

    def compact(self) -> str:
        """Compact serialization.

        Unsigned parts keep the trailing ``"."``; remove it before
        signing, then append the signature.

        """
        unsigned = self.header + '.' + self.payload + '.'
        if self.signature is None:
            return unsigned
        return unsigned + self.signature

    def get_data(self) -> 'DataJWT':
        """Decode with the default codec."""
        return DEFAULT_CODEC.get_data_by_parts(self)


class DataJWT(jose.ImmutableMap):
    """Decoded JWT.

    :ivar Headers header: Protected header.
    :ivar dict payload: JSON payload claims.
    :ivar signature: Signature bytes, ``None`` if not signed yet.

    """
    __slots__ = ('header', 'payload', 'signature')

    def __init__(self, header: Mapping[str, Any], payload: Dict[str, Any],
                 signature: Optional[bytes] = None) -> None:
        super().__init__(header=Headers(header), payload=payload,
                         signature=signature)

    @property
    def issuer(self) -> str:
        """The "iss" claim, or an empty string."""
        issuer = self.payload.get('iss')
        return '' if issuer is None else str(issuer)

    def claims(self) -> PayloadClaims:
        """Registered claims of the payload."""
        return PayloadClaims.from_json(self.payload)

    def parts_unsigned(self, codec: Optional['CompactJWTCodec'] = None) -> PartsJWT:
        """Encode header and payload; the signature is left out."""
        codec = DEFAULT_CODEC if codec is None else codec
        return codec.build_unsigned(self.header, self.payload)

    def compact_unsigned(self, codec: Optional['CompactJWTCodec'] = None) -> str:
        """``"BASE64URL(header).BASE64URL(payload)."``"""
        return self.parts_unsigned(codec).compact()


class CompactJWTCodec:
    """Compact JWT encoder/decoder.

    The JSON strategy is fixed at construction, so a codec can be shared
    freely between threads.

    :param dumps: Serializes a JSON value to bytes. Defaults to
        :func:`dumps_canonical`.
    :param loads: Parses JSON bytes. Defaults to :func:`json.loads`.

    """

    def __init__(self, dumps: JSONDumps = dumps_canonical,
                 loads: JSONLoads = json.loads) -> None:
        self._dumps = dumps
        self._loads = loads

    def _encode_json(self, value: Any) -> bytes:
        try:
            return self._dumps(value)
        except (TypeError, ValueError) as error:
            raise jose.SerializationError(error)

    def _decode_json(self, data: bytes) -> Any:
        try:
            return self._loads(data)
        except ValueError as error:
            raise jose.DeserializationError(error)

    @classmethod
    def split(cls, compact: str) -> PartsJWT:
        """Split a compact JWT into its three segments.

        Segments are not decoded.

        :raises joseutils.errors.MalformedTokenError: unless there are
            exactly three dot-separated segments.

        """
        segments = compact.split('.')
        if len(segments) != constants.JWT_SEGMENTS:
            raise errors.MalformedTokenError(constants.JWT_SEGMENTS, len(segments))
        header, payload, signature = segments
        return PartsJWT(header=header, payload=payload, signature=signature)

    def decode_header(self, parts: PartsJWT) -> Headers:
        """Decode the protected header segment."""
        header = self._decode_json(b64.decode(parts.header))
        if not isinstance(header, dict):
            raise jose.DeserializationError('JOSE header is not a JSON object')
        return Headers(header)

    def inflate_payload(self, parts: PartsJWT) -> Tuple[Headers, bytes]:
        """Decode the header and the (decompressed) payload bytes.

        :raises josepy.errors.DeserializationError: if the header is not
            a base64url JSON object, the payload is not base64url, or a
            compressed payload cannot be inflated.

        """
        headers = self.decode_header(parts)
        payload = b64.decode(parts.payload)
        if headers.compressed:
            payload = inflate(payload)
        return headers, payload

    def build_unsigned(self, header: Mapping[str, Any], payload: Any) -> PartsJWT:
        """Encode header and payload claims into unsigned parts.

        The payload is compressed when ``header["zip"] == "DEF"``.

        :raises josepy.errors.SerializationError: if header or payload
            cannot be dumped to JSON.

        """
        headers = Headers(header)
        payload_bytes = self._encode_json(payload)
        if headers.compressed:
            compressed = deflate(payload_bytes)
            logger.debug('Deflated JWT payload from %d to %d bytes',
                         len(payload_bytes), len(compressed))
            payload_bytes = compressed

        return PartsJWT(header=b64.encode(self._encode_json(headers)),
                        payload=b64.encode(payload_bytes))

    def get_data_by_parts(self, parts: PartsJWT) -> DataJWT:
        """Decode parts into header, payload claims and signature."""
        header, payload_bytes = self.inflate_payload(parts)
        payload = self._decode_json(payload_bytes)
        if not isinstance(payload, dict):
            raise jose.DeserializationError('JWT payload is not a JSON object')

        signature = b64.decode(parts.signature) if parts.signature else None
        return DataJWT(header=header, payload=payload, signature=signature)

    def get_data(self, compact: str) -> DataJWT:
        """Split and decode a compact JWT."""
        return self.get_data_by_parts(self.split(compact))

    def get_inflated_data(self, compact: str) -> Tuple[Headers, bytes]:
        """Split a compact JWT and return its header and payload bytes."""
        return self.inflate_payload(self.split(compact))


DEFAULT_CODEC = CompactJWTCodec()

split = DEFAULT_CODEC.split
inflate_payload = DEFAULT_CODEC.inflate_payload
build_unsigned = DEFAULT_CODEC.build_unsigned
get_data = DEFAULT_CODEC.get_data
get_inflated_data = DEFAULT_CODEC.get_inflated_data
