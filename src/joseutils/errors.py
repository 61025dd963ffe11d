"""joseutils errors."""
from typing import Any

from josepy import errors as jose_errors


class Error(jose_errors.Error):
    """Generic joseutils error."""


class MalformedTokenError(jose_errors.DeserializationError):
    """Compact token does not have the expected number of segments.

    :ivar int expected: Required number of dot-separated segments.
    :ivar int found: Number of segments in the rejected token.

    """
    def __init__(self, expected: int, found: int, *args: Any) -> None:
        self.expected = expected
        self.found = found
        super().__init__(*args)

    def __str__(self) -> str:
        return ('Deserialization error: compact serialization should comprise '
                'of exactly {0} dot-separated components, found {1}'.format(
                    self.expected, self.found))


class DecompressionError(jose_errors.DeserializationError):
    """Payload could not be inflated."""


class CompactSerializationError(jose_errors.SerializationError):
    """JWE holds data that compact serialization cannot express."""
    reason = 'JWE cannot be compact serialized'

    def __str__(self) -> str:
        return 'unable to compact serialize: ' + self.reason


class ProtectedHeaderMissingError(CompactSerializationError):
    """JWE has no protected header."""
    reason = 'no protected header found'


class NotSoleRecipientError(CompactSerializationError):
    """JWE does not have exactly one recipient.

    :ivar int count: Number of recipients found.

    """
    reason = ('JWE compact serialization only supports JWE with exactly '
              'one single recipient')

    def __init__(self, count: int, *args: Any) -> None:
        self.count = count
        super().__init__(*args)


class UnprotectedHeaderUnsupportedError(CompactSerializationError):
    """JWE has a shared unprotected header."""
    reason = ('JWE compact serialization does not support a shared '
              'unprotected header')


class AADUnsupportedError(CompactSerializationError):
    """JWE has additional authenticated data."""
    reason = 'JWE compact serialization does not support AAD'


class PerRecipientHeaderUnsupportedError(CompactSerializationError):
    """Sole recipient carries its own unprotected header."""
    reason = ('JWE compact serialization does not support a per-recipient '
              'unprotected header')


class EmptyCiphertextError(jose_errors.SerializationError):
    """JWE ciphertext is mandatory."""

    def __str__(self) -> str:
        return 'ciphertext cannot be empty'


class ClaimsValidationError(Error):
    """JWT claims failed validation."""
    reason = 'validation failed'

    def __str__(self) -> str:
        return self.reason


class InvalidIssuerError(ClaimsValidationError):
    """Unexpected "iss" claim."""
    reason = 'validation failed, invalid issuer claim (iss)'


class InvalidSubjectError(ClaimsValidationError):
    """Unexpected "sub" claim."""
    reason = 'validation failed, invalid subject claim (sub)'


class InvalidAudienceError(ClaimsValidationError):
    """Expected audience not found in "aud" claim."""
    reason = 'validation failed, invalid audience claim (aud)'


class InvalidIDError(ClaimsValidationError):
    """Unexpected "jti" claim."""
    reason = 'validation failed, invalid ID claim (jti)'


class NotValidYetError(ClaimsValidationError):
    """Token used before its "nbf" time."""
    reason = 'validation failed, token not valid yet (nbf)'


class ExpiredError(ClaimsValidationError):
    """Token used after its "exp" time."""
    reason = 'validation failed, token is expired (exp)'


class IssuedInTheFutureError(ClaimsValidationError):
    """Token "iat" lies in the future."""
    reason = 'validation failed, token issued in the future (iat)'
