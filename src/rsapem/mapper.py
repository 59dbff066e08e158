"""Maps RSA keys to and from their PKCS#1 and PKCS#8 DER layouts.

PKCS#1
    RSAPublicKey ::= SEQUENCE { modulus INTEGER, publicExponent INTEGER }
    RSAPrivateKey ::= SEQUENCE { version, modulus, publicExponent, privateExponent,
                                 prime1, prime2, exponent1, exponent2, coefficient }

PKCS#8
    SubjectPublicKeyInfo ::= SEQUENCE { algorithm AlgorithmIdentifier, subjectPublicKey BIT STRING }
    PrivateKeyInfo ::= SEQUENCE { version, privateKeyAlgorithm AlgorithmIdentifier, privateKey OCTET STRING }

Decoding tells the two apart by shape alone: a public key whose first element is an INTEGER is PKCS#1, and a
private key with exactly three elements is PKCS#8. Encoding produces PKCS#1 unless PKCS#8 is asked for.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pyasn1_modules import rfc8017

from rsapem import der
from rsapem.errors import MalformedDerError
from rsapem.keys import RsaPrivateKey
from rsapem.keys import RsaPublicKey

KeyFormat = typing.Literal["pkcs1", "pkcs8"]

PEM_LABELS: dict[str, tuple[str, str]] = {
    "pkcs1": ("RSA PUBLIC KEY", "RSA PRIVATE KEY"),
    "pkcs8": ("PUBLIC KEY", "PRIVATE KEY"),
}

RSA_ENCRYPTION = der.ObjectIdentifier(rfc8017.rsaEncryption.asTuple())
RSA_ALGORITHM = der.Sequence((RSA_ENCRYPTION, der.Null()))


def _check_format(fmt: str) -> None:
    if fmt not in PEM_LABELS:
        raise ValueError(f"Unknown key format {fmt}, expected one of: {', '.join(PEM_LABELS)}")


def _top_sequence(data: bytes, what: str) -> der.Sequence:
    node, _ = der.decode(data)
    return der.expect(node, der.Sequence, what)


def decode_public(data: bytes) -> RsaPublicKey:
    """Decodes a PKCS#1 RSAPublicKey or a PKCS#8 SubjectPublicKeyInfo.

    Args:
        data: The DER bytes.

    Returns:
        The public key.

    Raises:
        MalformedDerError: If the structure does not hold an RSA public key.
    """
    top = _top_sequence(data, "public key")
    match top.elements:
        case (der.Integer(), *_):
            body = top
        case _:
            wrapped = der.element(top, 1, der.BitString, "subjectPublicKey")
            body = _top_sequence(wrapped.data, "RSAPublicKey")
    modulus = der.element(body, 0, der.Integer, "modulus").value
    exponent = der.element(body, 1, der.Integer, "publicExponent").value
    try:
        return RsaPublicKey(modulus, exponent)
    except ValueError as exc:
        raise MalformedDerError(f"Decoded values do not form a public key: {exc}") from exc


def decode_private(data: bytes) -> RsaPrivateKey:
    """Decodes a PKCS#1 RSAPrivateKey or a PKCS#8 PrivateKeyInfo.

    The stored public exponent and CRT parameters are not read, they are derived again from d, p and q.

    Args:
        data: The DER bytes.

    Returns:
        The private key.

    Raises:
        MalformedDerError: If the structure does not hold an RSA private key.
    """
    top = _top_sequence(data, "private key")
    if len(top) == 3:
        wrapped = der.element(top, 2, der.OctetString, "privateKey")
        body = _top_sequence(wrapped.data, "RSAPrivateKey")
    else:
        body = top
    modulus = der.element(body, 1, der.Integer, "modulus").value
    private_exponent = der.element(body, 3, der.Integer, "privateExponent").value
    p = der.element(body, 4, der.Integer, "prime1").value
    q = der.element(body, 5, der.Integer, "prime2").value
    try:
        return RsaPrivateKey(modulus, private_exponent, p, q)
    except ValueError as exc:
        raise MalformedDerError(f"Decoded values do not form a private key: {exc}") from exc


def public_structure(key: RsaPublicKey, fmt: KeyFormat = "pkcs1") -> der.Sequence:
    """Builds the DER tree of a public key."""
    _check_format(fmt)
    body = der.Sequence((der.Integer(key.modulus), der.Integer(key.exponent)))
    if fmt == "pkcs1":
        return body
    return der.Sequence((RSA_ALGORITHM, der.BitString(der.encode(body))))


def private_structure(key: RsaPrivateKey, fmt: KeyFormat = "pkcs1") -> der.Sequence:
    """Builds the DER tree of a private key.

    Raises:
        MalformedDerError: If q has no inverse modulo p or d has none modulo lcm(p - 1, q - 1).
    """
    _check_format(fmt)
    try:
        qinv = key.qinv
        public_exponent = key.public_exponent
    except ValueError as exc:
        raise MalformedDerError(f"Cannot derive CRT parameters: {exc}") from exc
    fields = (0, key.modulus, public_exponent, key.private_exponent, key.p, key.q, key.dp, key.dq, qinv)
    body = der.Sequence(tuple(der.Integer(f) for f in fields))
    if fmt == "pkcs1":
        return body
    return der.Sequence((der.Integer(0), RSA_ALGORITHM, der.OctetString(der.encode(body))))


def encode_public(key: RsaPublicKey, fmt: KeyFormat = "pkcs1") -> tuple[str, bytes]:
    """Encodes a public key.

    Args:
        key: The key.
        fmt: "pkcs1" for RSAPublicKey or "pkcs8" for SubjectPublicKeyInfo.

    Returns:
        The PEM label and the DER bytes.
    """
    encoded = der.encode(public_structure(key, fmt))
    return PEM_LABELS[fmt][0], encoded


def encode_private(key: RsaPrivateKey, fmt: KeyFormat = "pkcs1") -> tuple[str, bytes]:
    """Encodes a private key.

    The fields follow RFC 8017 order: version, n, e, d, p, q, dP, dQ, qInv.

    Args:
        key: The key.
        fmt: "pkcs1" for RSAPrivateKey or "pkcs8" for PrivateKeyInfo.

    Returns:
        The PEM label and the DER bytes.
    """
    encoded = der.encode(private_structure(key, fmt))
    return PEM_LABELS[fmt][1], encoded
