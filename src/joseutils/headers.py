"""JOSE headers.

:class:`Headers` is the untyped header map used by the compact codec.
:class:`HeaderRequestJWS` and :class:`HeaderRequestJWE` describe the
registered parameters of signed and encrypted request messages and
convert to :class:`Headers` when a token is built.

"""
from typing import Any
from typing import Dict
from typing import Optional

import josepy as jose

from joseutils import constants
from joseutils import util


class Headers(Dict[str, Any]):
    """JOSE header parameters.

    No parameter is required by the codec. Accessors return ``None``
    when the parameter is absent or when it is not a JSON string.

    """

    def _string(self, name: str) -> Optional[str]:
        value = self.get(name)
        return value if isinstance(value, str) else None

    def algorithm(self) -> Optional[str]:
        """Algorithm ("alg")."""
        return self._string(constants.HEADER_ALGORITHM)

    def encryption(self) -> Optional[str]:
        """Content encryption algorithm ("enc")."""
        return self._string(constants.HEADER_ENCRYPTION)

    def key_id(self) -> Optional[str]:
        """Key ID ("kid")."""
        return self._string(constants.HEADER_KEY_ID)

    def sender_key_id(self) -> Optional[str]:
        """Sender key ID ("skid")."""
        return self._string(constants.HEADER_SENDER_KEY_ID)

    def typ(self) -> Optional[str]:
        """Media type of the complete token ("typ")."""
        return self._string(constants.HEADER_TYPE)

    def content_type(self) -> Optional[str]:
        """Media type of the secured content ("cty")."""
        return self._string(constants.HEADER_CONTENT_TYPE)

    def compression(self) -> Optional[str]:
        """Compression algorithm ("zip")."""
        return self._string(constants.HEADER_COMPRESSION)

    @property
    def compressed(self) -> bool:
        """Is the payload raw DEFLATE compressed?"""
        return self.compression() == constants.COMPRESSION_DEFLATE


class _RequestHeader(jose.JSONObjectWithFields):
    """Registered header parameters of a request message."""

    def to_headers(self) -> Headers:
        """Convert to a plain header map (omitted fields dropped)."""
        return Headers(self.to_json())


class HeaderRequestJWS(_RequestHeader):
    """JOSE header of a signed request message.

    :ivar str alg: Signature algorithm, MUST NOT be "none".
    :ivar str cty: Content type, e.g. "didcomm-signed+json".
    :ivar jwks: Sender's public signature (first) and encryption (second)
        keys.
    :ivar str kid: Key ID of the signing key.
    :ivar str to: Service endpoint, same as the payload's "aud" (or the
        "htu" of a DPoP token).
    :ivar str typ: Token media type, "jwt".
    :ivar str zip: "DEF" if the payload is compressed.

    """
    alg: Optional[str] = jose.field(constants.HEADER_ALGORITHM, omitempty=True)
    cty: Optional[str] = jose.field(constants.HEADER_CONTENT_TYPE, omitempty=True)
    jwks: Optional[Any] = jose.field(
        constants.HEADER_JWK_SET, omitempty=True, decoder=util.decode_raw_json)
    kid: Optional[str] = jose.field(constants.HEADER_KEY_ID, omitempty=True)
    to: Optional[str] = jose.field(constants.HEADER_TO, omitempty=True)
    typ: Optional[str] = jose.field(constants.HEADER_TYPE, omitempty=True)
    zip: Optional[str] = jose.field(constants.HEADER_COMPRESSION, omitempty=True)

    # Mypy does not understand the josepy magic happening here, and falsely claims
    # that alg is redefined. Let's ignore the type check here.
    @alg.decoder  # type: ignore[no-redef,attr-defined,union-attr]
    def alg(value: str) -> str:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        if value == constants.ALG_NONE:
            raise jose.DeserializationError(
                'Signature algorithm "none" is not allowed')
        return value


class HeaderRequestJWE(_RequestHeader):
    """JOSE header of an encrypted request message.

    :ivar str alg: Algorithm used to encrypt (encapsulate) the CEK.
    :ivar str cty: Content type of the plaintext, "didcomm-signed+json"
        for a nested signed message.
    :ivar str enc: Content encryption algorithm, e.g. "A256GCM".
    :ivar jwk: Recipient's public key the CEK was encrypted to
        (:class:`josepy.JWK`).
    :ivar str jku: Recipient's JWK Set URL.
    :ivar str kid: Recipient's key ID.
    :ivar str skid: Sender's public encryption key ID.
    :ivar str typ: Token media type, "jwt".

    """
    alg: Optional[str] = jose.field(constants.HEADER_ALGORITHM, omitempty=True)
    cty: Optional[str] = jose.field(constants.HEADER_CONTENT_TYPE, omitempty=True)
    enc: Optional[str] = jose.field(constants.HEADER_ENCRYPTION, omitempty=True)
    jwk: Optional[jose.JWK] = jose.field(
        constants.HEADER_JWK, omitempty=True, decoder=jose.JWK.from_json)
    jku: Optional[str] = jose.field(constants.HEADER_JWK_SET_URL, omitempty=True)
    kid: Optional[str] = jose.field(constants.HEADER_KEY_ID, omitempty=True)
    skid: Optional[str] = jose.field(constants.HEADER_SENDER_KEY_ID, omitempty=True)
    typ: Optional[str] = jose.field(constants.HEADER_TYPE, omitempty=True)
