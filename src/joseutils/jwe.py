"""JSON Web Encryption serialization.

Only the serialization side of `RFC 7516`_ is implemented: content
encryption and key management produce the byte strings held by
:class:`JWE` and are the caller's responsibility.

Compact serialization (section 7.1) is::

  BASE64URL(UTF8(JWE Protected Header)) "."
  BASE64URL(JWE Encrypted Key) "."
  BASE64URL(JWE Initialization Vector) "."
  BASE64URL(JWE Ciphertext) "."
  BASE64URL(JWE Authentication Tag)

It cannot carry a shared unprotected header, AAD, per-recipient headers
or more than one recipient; :meth:`JWE.to_compact` refuses such objects
instead of dropping data.

.. _`RFC 7516`: https://www.rfc-editor.org/rfc/rfc7516

"""
import json
import logging
from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional
from typing import Tuple

import josepy as jose

from joseutils import b64
from joseutils import compact
from joseutils import constants
from joseutils import errors
from joseutils import util
from joseutils.headers import Headers

logger = logging.getLogger(__name__)


def _b64_field(json_name: str, omitempty: bool = True) -> Any:
    return jose.field(json_name, omitempty=omitempty, default=b'',
                      encoder=jose.encode_b64jose, decoder=b64.decode)


class RecipientHeaders(jose.JSONObjectWithFields):
    """Per-recipient unprotected header.

    :ivar str alg: Key management algorithm for this recipient.
    :ivar str apu: Agreement PartyUInfo.
    :ivar str apv: Agreement PartyVInfo.
    :ivar str iv: Key wrapping IV (e.g. "A256GCMKW").
    :ivar str tag: Key wrapping tag (e.g. "A256GCMKW").
    :ivar str kid: Recipient key ID.
    :ivar epk: Ephemeral public key (JSON object).

    """
    alg: Optional[str] = jose.field(constants.HEADER_ALGORITHM, omitempty=True)
    apu: Optional[str] = jose.field(constants.HEADER_APU, omitempty=True)
    apv: Optional[str] = jose.field(constants.HEADER_APV, omitempty=True)
    iv: Optional[str] = jose.field(constants.HEADER_IV, omitempty=True)
    tag: Optional[str] = jose.field(constants.HEADER_TAG, omitempty=True)
    kid: Optional[str] = jose.field(constants.HEADER_KEY_ID, omitempty=True)
    epk: Optional[Dict[str, Any]] = jose.field(
        constants.HEADER_EPK, omitempty=True, decoder=util.decode_json_object)


class Recipient(jose.JSONObjectWithFields):
    """JWE recipient.

    :ivar RecipientHeaders header: Optional per-recipient header.
    :ivar bytes encrypted_key: CEK encrypted to this recipient.

    """
    header: Optional[RecipientHeaders] = jose.field(
        'header', omitempty=True, decoder=RecipientHeaders.from_json)
    encrypted_key: bytes = _b64_field('encrypted_key')


class JWE(jose.JSONObjectWithFields):
    """JSON Web Encryption.

    :ivar protected: Protected header (mapping), ``None`` if absent.
    :ivar str protected_b64: Encoded protected header exactly as it is
        serialized, and as it was received for a parsed JWE. It is the
        input of the JWE AAD, so it is never re-encoded.
    :ivar unprotected: Shared unprotected header (mapping), ``None`` if
        absent.
    :ivar tuple recipients: :class:`Recipient` objects.
    :ivar bytes aad: Additional authenticated data.
    :ivar bytes iv: Initialization vector.
    :ivar bytes ciphertext: Ciphertext, required.
    :ivar bytes tag: Authentication tag.

    """
    __slots__ = ('protected_b64',)
    protected: Optional[Mapping[str, Any]] = jose.field('protected', omitempty=True)
    unprotected: Optional[Dict[str, Any]] = jose.field(
        'unprotected', omitempty=True, decoder=util.decode_json_object)
    recipients: Tuple[Recipient, ...] = jose.field(
        'recipients', omitempty=True, default=())
    aad: bytes = _b64_field('aad')
    iv: bytes = _b64_field('iv')
    ciphertext: bytes = _b64_field('ciphertext', omitempty=False)
    tag: bytes = _b64_field('tag')

    @protected.encoder  # type: ignore[no-redef,attr-defined,union-attr]
    def protected(value: Mapping[str, Any]) -> str:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        return b64.encode(compact.dumps_canonical(value))

    @protected.decoder  # type: ignore[no-redef,attr-defined,union-attr]
    def protected(value: str) -> Headers:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        try:
            header = json.loads(b64.decode(value))
        except ValueError as error:
            raise jose.DeserializationError(error)
        if not isinstance(header, dict):
            raise jose.DeserializationError('Protected header is not a JSON object')
        return Headers(header)

    @recipients.decoder  # type: ignore[no-redef,attr-defined,union-attr]
    def recipients(value: Any) -> Tuple[Recipient, ...]:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        if not isinstance(value, list):
            raise jose.DeserializationError('"recipients" is not an array')
        if value == [{}]:
            return ()
        return tuple(Recipient.from_json(recipient) for recipient in value)

    def __init__(self, **kwargs: Any) -> None:
        if 'protected_b64' not in kwargs:
            kwargs['protected_b64'] = self._encode_protected(kwargs.get('protected'))
        super().__init__(**kwargs)

    @classmethod
    def _encode_protected(cls, protected: Optional[Mapping[str, Any]]) -> Optional[str]:
        if protected is None:
            return None
        return cls._fields['protected'].encode(protected)

    def update(self, **kwargs: Any) -> 'JWE':
        # a new protected header invalidates the received encoding
        if 'protected' in kwargs and 'protected_b64' not in kwargs:
            kwargs['protected_b64'] = self._encode_protected(kwargs['protected'])
        return super().update(**kwargs)

    def to_compact(self) -> str:
        """Compact serialization of a sole-recipient JWE.

        :raises joseutils.errors.CompactSerializationError: if the JWE
            holds anything compact serialization cannot represent.
        :raises joseutils.errors.EmptyCiphertextError: if there is no
            ciphertext.

        """
        if self.protected is None:
            raise errors.ProtectedHeaderMissingError()
        if len(self.recipients) != 1:
            raise errors.NotSoleRecipientError(len(self.recipients))
        if self.unprotected is not None:
            raise errors.UnprotectedHeaderUnsupportedError()
        if self.aad:
            raise errors.AADUnsupportedError()
        recipient = self.recipients[0]
        if recipient.header is not None:
            raise errors.PerRecipientHeaderUnsupportedError()
        if not self.ciphertext:
            raise errors.EmptyCiphertextError()

        return '.'.join((
            self.protected_b64,
            b64.encode(recipient.encrypted_key),
            b64.encode(self.iv),
            b64.encode(self.ciphertext),
            b64.encode(self.tag),
        ))

    @classmethod
    def from_compact(cls, compact_jwe: str) -> 'JWE':
        """Compact deserialization.

        :raises joseutils.errors.MalformedTokenError: unless there are
            exactly five dot-separated segments.

        """
        segments = compact_jwe.split('.')
        if len(segments) != constants.JWE_SEGMENTS:
            raise errors.MalformedTokenError(constants.JWE_SEGMENTS, len(segments))
        protected, encrypted_key, iv, ciphertext, tag = segments

        return cls(protected=cls._fields['protected'].decode(protected),
                   protected_b64=protected,
                   recipients=(Recipient(encrypted_key=b64.decode(encrypted_key)),),
                   iv=b64.decode(iv), ciphertext=b64.decode(ciphertext),
                   tag=b64.decode(tag))

    def to_partial_json(self) -> Dict[str, Any]:
        """JSON serialization (RFC 7516, section 7.2).

        A sole recipient is serialized with the flattened syntax, always
        with its "encrypted_key" member (empty for direct encryption), so
        it reads back as one recipient.

        """
        if not self.ciphertext:
            raise errors.EmptyCiphertextError()

        jobj: Dict[str, Any] = {}
        if self.protected is not None:
            jobj['protected'] = self.protected_b64
        if self.unprotected is not None:
            jobj['unprotected'] = self.unprotected

        if not self.recipients:
            # "recipients" must always be an array, even if its only
            # member is the empty JSON object
            jobj['recipients'] = [{}]
        elif len(self.recipients) == 1:
            logger.debug('Using flattened JWE JSON serialization syntax')
            recipient = self.recipients[0]
            jobj['encrypted_key'] = recipient.encode('encrypted_key')
            if recipient.header is not None:
                jobj['header'] = recipient.header
        else:
            jobj['recipients'] = list(self.recipients)

        for name in ('aad', 'iv', 'ciphertext', 'tag'):
            if getattr(self, name):
                jobj[name] = self.encode(name)
        return jobj

    @classmethod
    def from_json(cls, jobj: Mapping[str, Any]) -> 'JWE':
        if not isinstance(jobj, Mapping):
            raise jose.DeserializationError('JWE is not a JSON object')
        flat = 'encrypted_key' in jobj or 'header' in jobj
        if flat and 'recipients' in jobj:
            raise jose.DeserializationError('Flat mixed with non-flat')

        fields = cls.fields_from_json(jobj)
        if flat:
            fields['recipients'] = (Recipient.from_json(dict(
                (name, jobj[name]) for name in ('header', 'encrypted_key')
                if name in jobj)),)
        return cls(protected_b64=jobj.get('protected'), **fields)
