"""Bridges the codec's key types to the `cryptography` RSA implementation.

Key generation, padding and the RSA primitives themselves are not implemented here: they are delegated to
`cryptography`, which also supplies the secure random source. Key generation is the only slow operation, so a
coroutine variant runs it in a worker thread.

Typical usage example:

    pub, priv = generate_key_pair(2048)
    pub, priv = await compute_key_pair(3072)
    backend_key = to_private_backend(priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import asyncio

from cryptography.hazmat.primitives.asymmetric import rsa

from rsapem.keys import RsaPrivateKey
from rsapem.keys import RsaPublicKey

KEY_SIZES = (1024, 2048, 3072, 4096)


def to_public_backend(key: RsaPublicKey) -> rsa.RSAPublicKey:
    return rsa.RSAPublicNumbers(key.exponent, key.modulus).public_key()


def to_private_backend(key: RsaPrivateKey) -> rsa.RSAPrivateKey:
    """Builds a `cryptography` private key, deriving e and the CRT parameters.

    Raises:
        ValueError: If the key components are inconsistent.
    """
    pubs = rsa.RSAPublicNumbers(key.public_exponent, key.modulus)
    privs = rsa.RSAPrivateNumbers(key.p, key.q, key.private_exponent, key.dp, key.dq, key.qinv, pubs)
    return privs.private_key()


def from_public_backend(key: rsa.RSAPublicKey) -> RsaPublicKey:
    pubs = key.public_numbers()
    return RsaPublicKey(pubs.n, pubs.e)


def from_private_backend(key: rsa.RSAPrivateKey) -> RsaPrivateKey:
    privs = key.private_numbers()
    return RsaPrivateKey(privs.public_numbers.n, privs.d, privs.p, privs.q)


def generate_key_pair(size: int = 2048, pub_exp: int = 65537) -> tuple[RsaPublicKey, RsaPrivateKey]:
    """Generates an RSA key pair.

    Args:
        size: The key size in bits.
        pub_exp: The public exponent. 65537 unless there is a very good reason.

    Returns:
        The public and the private key.

    Raises:
        ValueError: If `size` or `pub_exp` is rejected by the backend.
    """
    backend_key = rsa.generate_private_key(public_exponent=pub_exp, key_size=size)
    return from_public_backend(backend_key.public_key()), from_private_backend(backend_key)


async def compute_key_pair(size: int = 2048, pub_exp: int = 65537) -> tuple[RsaPublicKey, RsaPrivateKey]:
    """Generates an RSA key pair without blocking the running event loop.

    Args:
        size: The key size in bits.
        pub_exp: The public exponent.

    Returns:
        The public and the private key.
    """
    return await asyncio.to_thread(generate_key_pair, size, pub_exp)
