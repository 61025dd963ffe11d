"""JWT registered claims (RFC 7519, section 4.1)."""
import datetime
import logging
import time
from typing import Any
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

import josepy as jose
import pyrfc3339
import pytz

from joseutils import errors

logger = logging.getLogger(__name__)


class NumericDateField(jose.Field):
    """NumericDate field encoder/decoder.

    Handles decoding/encoding between seconds since the epoch and aware
    (not naive) `datetime.datetime` objects. Sub-second precision is
    dropped on both sides.

    """

    @classmethod
    def default_encoder(cls, value: datetime.datetime) -> int:
        return int(value.timestamp())

    @classmethod
    def default_decoder(cls, value: Any) -> datetime.datetime:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise jose.DeserializationError(
                'expected number value to unmarshal NumericDate')
        try:
            return datetime.datetime.fromtimestamp(int(value), pytz.utc)
        except (OverflowError, ValueError, OSError) as error:
            raise jose.DeserializationError(error)


def numeric_date(json_name: str) -> Any:
    """Generates a type-friendly NumericDate field."""
    return NumericDateField(json_name, omitempty=True)


def decode_audience(value: Any) -> Tuple[str, ...]:
    """Decode "aud", either a single string or an array of strings."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(aud, str) for aud in value):
        return tuple(value)
    raise jose.DeserializationError(
        'expected string or array value to unmarshal to audience')


def encode_audience(value: Union[str, Iterable[str]]) -> List[str]:
    """Encode "aud" as an array of strings."""
    if isinstance(value, str):
        return [value]
    return list(value)


def audience_contains(audience: Optional[Iterable[str]], value: str) -> bool:
    """Is ``value`` one of the intended recipients?"""
    return audience is not None and value in tuple(audience)


def audience_to_string(audience: Optional[Iterable[str]]) -> str:
    """Join the audience with single spaces."""
    return '' if audience is None else ' '.join(audience)


class PayloadClaims(jose.JSONObjectWithFields):
    """Registered JWT claims.

    :ivar str iss: Issuer.
    :ivar str sub: Subject.
    :ivar tuple aud: Audience.
    :ivar datetime.datetime exp: Expiration time.
    :ivar datetime.datetime nbf: Not before.
    :ivar datetime.datetime iat: Issued at.
    :ivar str jti: JWT ID.

    """
    iss: Optional[str] = jose.field('iss', omitempty=True)
    sub: Optional[str] = jose.field('sub', omitempty=True)
    aud: Optional[Tuple[str, ...]] = jose.field(
        'aud', omitempty=True, decoder=decode_audience, encoder=encode_audience)
    exp: Optional[datetime.datetime] = numeric_date('exp')
    nbf: Optional[datetime.datetime] = numeric_date('nbf')
    iat: Optional[datetime.datetime] = numeric_date('iat')
    jti: Optional[str] = jose.field('jti', omitempty=True)

    def validate(self, issuer: Optional[str] = None, subject: Optional[str] = None,
                 audience: Optional[str] = None, jti: Optional[str] = None,
                 now: Optional[datetime.datetime] = None,
                 leeway: datetime.timedelta = datetime.timedelta(0)) -> None:
        """Validate claims against expected values and the current time.

        Expected values left as ``None`` are not checked. Time based
        claims are checked only when present.

        :param datetime.datetime now: Aware current time, defaults to
            ``datetime.datetime.now(pytz.utc)``.
        :param datetime.timedelta leeway: Allowed clock skew.

        :raises joseutils.errors.ClaimsValidationError: on the first
            failing check.

        """
        if issuer is not None and self.iss != issuer:
            raise errors.InvalidIssuerError()
        if subject is not None and self.sub != subject:
            raise errors.InvalidSubjectError()
        if audience is not None and not audience_contains(self.aud, audience):
            raise errors.InvalidAudienceError()
        if jti is not None and self.jti != jti:
            raise errors.InvalidIDError()

        now = datetime.datetime.now(pytz.utc) if now is None else now
        if self.nbf is not None and now + leeway < self.nbf:
            raise errors.NotValidYetError()
        if self.exp is not None and now - leeway > self.exp:
            raise errors.ExpiredError()
        if self.iat is not None and now + leeway < self.iat:
            raise errors.IssuedInTheFutureError()


def check_not_expired_epoch(seconds: int, now: Optional[int] = None) -> bool:
    """Is the epoch time ``seconds`` still in the future?"""
    current = int(time.time()) if now is None else now
    return seconds > current


def check_not_expired_rfc3339(value: str,
                              now: Optional[datetime.datetime] = None) -> bool:
    """Is the RFC 3339 timestamp ``value`` still in the future?

    Unparseable timestamps count as expired.

    """
    try:
        end = pyrfc3339.parse(value)
    except ValueError as error:
        logger.debug('Treating %r as expired: %s', value, error)
        return False
    now = datetime.datetime.now(pytz.utc) if now is None else now
    return now < end
