"""JOSE constants."""
import zlib

HEADER_ALGORITHM = 'alg'
"""For JWS: algorithm securing the JWS. For JWE: algorithm for the CEK."""
HEADER_ENCRYPTION = 'enc'
"""JWE content encryption algorithm."""
HEADER_COMPRESSION = 'zip'
HEADER_CONTENT_TYPE = 'cty'
HEADER_TYPE = 'typ'
HEADER_KEY_ID = 'kid'
HEADER_SENDER_KEY_ID = 'skid'
"""Sender's public key used in the JWE key derivation/wrapping."""
HEADER_JWK = 'jwk'
HEADER_JWK_SET = 'jwks'
"""Sender's public signature and encryption keys (JWS only)."""
HEADER_JWK_SET_URL = 'jku'
HEADER_TO = 'to'
"""Service endpoint the message is addressed to."""
HEADER_CRITICAL = 'crit'
HEADER_EPK = 'epk'
HEADER_APU = 'apu'
HEADER_APV = 'apv'
HEADER_IV = 'iv'
HEADER_TAG = 'tag'
HEADER_X509_URL = 'x5u'
HEADER_X509_CHAIN = 'x5c'
HEADER_X509_SHA1 = 'x5t'
HEADER_X509_SHA256 = 'x5t#S256'
HEADER_B64_PAYLOAD = 'b64'

COMPRESSION_DEFLATE = 'DEF'
"""Value of the "zip" header requesting raw DEFLATE (RFC 1951)."""

DEFLATE_LEVEL = zlib.Z_BEST_COMPRESSION
DEFLATE_WBITS = -zlib.MAX_WBITS
"""Negative window bits select a raw stream, no zlib or gzip framing."""

JWT_SEGMENTS = 3
JWE_SEGMENTS = 5

ALG_NONE = 'none'

# content encryption ("enc") algorithms, RFC 7518 section 5.1
A256GCM = 'A256GCM'
XC20P = 'XC20P'
A128CBC_HS256 = 'A128CBC-HS256'
A192CBC_HS384 = 'A192CBC-HS384'
A256CBC_HS512 = 'A256CBC-HS512'

# key management ("alg") algorithms, RFC 7518 section 4.1
A256KW = 'A256KW'
A256GCMKW = 'A256GCMKW'

TYPE_JWT = 'jwt'
CONTENT_TYPE_DIDCOMM_SIGNED = 'didcomm-signed+json'
