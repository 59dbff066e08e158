"""Public entry points: parse and encode PEM keys, and sign, verify, encrypt and decrypt with them.

Parsing accepts PKCS#1 and PKCS#8 keys alike; encoding writes PKCS#1 unless told otherwise. The RSA operations
use PKCS#1 v1.5 padding and, for signatures, SHA-256.

Typical usage example:

    pk = parse_private_key(pem_text)
    signature = sign("Hi there!", pk)
    assert verify("Hi there!", signature, pk.public_key)
    pem_text = encode_private_key(pk)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from rsapem import engine
from rsapem import mapper
from rsapem import pem
from rsapem.keys import RsaPrivateKey
from rsapem.keys import RsaPublicKey
from rsapem.mapper import KeyFormat


def parse_public_key(pem_text: str, strict: bool = False) -> RsaPublicKey:
    """Parses a PEM encoded PKCS#1 or PKCS#8 public key.

    Args:
        pem_text: The PEM text.
        strict: Require a matching BEGIN/END marker pair.

    Returns:
        The public key.

    Raises:
        FormatError: If the PEM framing or base64 body is invalid.
        MalformedDerError: If the payload is not an RSA public key.
    """
    return mapper.decode_public(pem.strip(pem_text, strict).body)


def parse_private_key(pem_text: str, strict: bool = False) -> RsaPrivateKey:
    """Parses a PEM encoded PKCS#1 or PKCS#8 private key.

    Args:
        pem_text: The PEM text.
        strict: Require a matching BEGIN/END marker pair.

    Returns:
        The private key.

    Raises:
        FormatError: If the PEM framing or base64 body is invalid.
        MalformedDerError: If the payload is not an RSA private key.
    """
    return mapper.decode_private(pem.strip(pem_text, strict).body)


def encode_public_key(key: RsaPublicKey, fmt: KeyFormat = "pkcs1") -> str:
    """Encodes a public key as PEM, under "RSA PUBLIC KEY" (PKCS#1) or "PUBLIC KEY" (PKCS#8)."""
    return pem.wrap(*mapper.encode_public(key, fmt))


def encode_private_key(key: RsaPrivateKey, fmt: KeyFormat = "pkcs1") -> str:
    """Encodes a private key as PEM, under "RSA PRIVATE KEY" (PKCS#1) or "PRIVATE KEY" (PKCS#8).

    The CRT parameters are computed from d, p and q, so the output is the same on every call.

    Raises:
        MalformedDerError: If the CRT parameters cannot be derived.
    """
    return pem.wrap(*mapper.encode_private(key, fmt))


def _utf8(message: str | bytes) -> bytes:
    """UTF-8 bytes of the message, replacing anything that is not valid UTF-8."""
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return message.encode("utf-8", errors="replace")


def sign(message: str | bytes, private_key: RsaPrivateKey) -> str:
    """Signs a message with RSASSA-PKCS1-v1_5 and SHA-256.

    Args:
        message: The message. Malformed UTF-8 is replaced rather than rejected.
        private_key: The signing key.

    Returns:
        The base64 encoded signature.
    """
    signer = engine.to_private_backend(private_key)
    signature = signer.sign(_utf8(message), padding.PKCS1v15(), hashes.SHA256())
    return base64.b64encode(signature).decode("ascii")


def verify(message: str | bytes, signature: str, public_key: RsaPublicKey) -> bool:
    """Verifies a signature produced by `sign`.

    Args:
        message: The message the signature claims to cover.
        signature: The base64 encoded signature.
        public_key: The key to verify against.

    Returns:
        True if the signature matches the message. False otherwise, including when the signature is not valid
        base64 or the key is one the backend refuses, such as one with an even exponent.
    """
    try:
        raw = base64.b64decode(signature, validate=True)
        engine.to_public_backend(public_key).verify(raw, _utf8(message), padding.PKCS1v15(), hashes.SHA256())
    except (InvalidSignature, ValueError):
        return False
    return True


def encrypt(data: bytes, public_key: RsaPublicKey) -> bytes:
    """Encrypts with RSAES-PKCS1-v1_5.

    Raises:
        ValueError: If the data is too long for the key.
    """
    return engine.to_public_backend(public_key).encrypt(data, padding.PKCS1v15())


def decrypt(data: bytes, private_key: RsaPrivateKey) -> bytes:
    """Decrypts RSAES-PKCS1-v1_5 ciphertext.

    Raises:
        ValueError: If decryption fails.
    """
    return engine.to_private_backend(private_key).decrypt(data, padding.PKCS1v15())
