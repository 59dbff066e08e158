"""In-memory RSA key material.

Both key types are immutable and validate their invariants on construction. The private key only stores the
modulus, private exponent and the two primes; the public exponent and the CRT parameters are derived on demand
and come out identical on every call.

Typical usage example:

    pk = RsaPrivateKey(n, d, p, q)
    dp, dq, qinv = pk.dp, pk.dq, pk.qinv
    pub = pk.public_key
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import math


@dataclasses.dataclass(frozen=True)
class RsaPublicKey:
    """An RSA public key.

    Attributes:
        modulus: The modulus n. Positive and odd.
        exponent: The public exponent e. Greater than 1.
    """
    modulus: int
    exponent: int

    def __post_init__(self) -> None:
        if self.modulus <= 0 or self.modulus % 2 == 0:
            raise ValueError("Modulus must be a positive odd integer")
        if self.exponent <= 1:
            raise ValueError("Public exponent must be greater than 1")

    @property
    def size(self) -> int:
        """Key size in bits."""
        return self.modulus.bit_length()


@dataclasses.dataclass(frozen=True)
class RsaPrivateKey:
    """A two-prime RSA private key.

    Attributes:
        modulus: The modulus n.
        private_exponent: The private exponent d.
        p: Private Prime 1.
        q: Private Prime 2.
    """
    modulus: int
    private_exponent: int
    p: int
    q: int

    def __post_init__(self) -> None:
        if min(self.modulus, self.private_exponent, self.p, self.q) <= 0:
            raise ValueError("All private key components must be positive")
        if self.p * self.q != self.modulus:
            raise ValueError("Modulus does not equal p * q")

    @property
    def size(self) -> int:
        """Key size in bits."""
        return self.modulus.bit_length()

    @property
    def dp(self) -> int:
        """CRT exponent d mod (p - 1)."""
        return self.private_exponent % (self.p - 1)

    @property
    def dq(self) -> int:
        """CRT exponent d mod (q - 1)."""
        return self.private_exponent % (self.q - 1)

    @property
    def qinv(self) -> int:
        """CRT coefficient q^-1 mod p.

        Raises:
            ValueError: If q is not invertible modulo p.
        """
        return pow(self.q, -1, self.p)

    @property
    def public_exponent(self) -> int:
        """The public exponent, recovered as d^-1 mod lcm(p - 1, q - 1).

        Equals the original e whenever e < lcm(p - 1, q - 1), which holds for any real key regardless of whether d
        was reduced modulo the totient or the Carmichael function.

        Raises:
            ValueError: If d is not invertible, i.e. the key is inconsistent.
        """
        return pow(self.private_exponent, -1, math.lcm(self.p - 1, self.q - 1))

    @property
    def public_key(self) -> RsaPublicKey:
        return RsaPublicKey(self.modulus, self.public_exponent)
