"""JOSE utilities for decentralized identity and OpenID messaging.

This package implements the serialization side of `JSON Web Signature
(JWS)`_ and `JSON Web Encryption (JWE)`_ on top of `josepy`_:

  - compact JWT serialization (with optional ``"zip": "DEF"`` payload
    compression),
  - compact and JSON (general and flattened) JWE serialization,
  - typed JOSE headers and registered JWT claims.

Cryptographic primitives (content encryption, key wrapping) are left to
the caller; signing and verification are delegated to `josepy`_.

.. _`JSON Web Signature (JWS)`: https://www.rfc-editor.org/rfc/rfc7515
.. _`JSON Web Encryption (JWE)`: https://www.rfc-editor.org/rfc/rfc7516
.. _`josepy`: https://github.com/certbot/josepy

"""

# version number like 1.2.3a0, must have at least 2 parts, like 1.2
__version__ = '0.4.0'
