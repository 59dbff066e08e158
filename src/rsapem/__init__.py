"""RSA key material to and from PEM, in PKCS#1 and PKCS#8.

Parses PEM encoded RSA public and private keys in either PKCS#1 or PKCS#8 layout and writes them back out, with
the ASN.1 DER work done by pyasn1. Signing, verification, encryption and key generation are delegated to the
`cryptography` package.

Typical usage example:

    pub, pk = generate_key_pair(2048)
    text = encode_private_key(pk)
    pk = parse_private_key(text)
    signature = sign("Hi there!", pk)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsapem.engine import compute_key_pair
from rsapem.engine import generate_key_pair
from rsapem.errors import FormatError
from rsapem.errors import MalformedDerError
from rsapem.keys import RsaPrivateKey
from rsapem.keys import RsaPublicKey
from rsapem.pem import PemBlock
from rsapem.rsa import decrypt
from rsapem.rsa import encode_private_key
from rsapem.rsa import encode_public_key
from rsapem.rsa import encrypt
from rsapem.rsa import parse_private_key
from rsapem.rsa import parse_public_key
from rsapem.rsa import sign
from rsapem.rsa import verify

__version__ = "0.1.0"
__all__ = [
    "RsaPrivateKey",
    "RsaPublicKey",
    "PemBlock",
    "FormatError",
    "MalformedDerError",
    "parse_public_key",
    "parse_private_key",
    "encode_public_key",
    "encode_private_key",
    "sign",
    "verify",
    "encrypt",
    "decrypt",
    "generate_key_pair",
    "compute_key_pair",
]
