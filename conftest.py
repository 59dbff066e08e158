"""Configures pytest further."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math

from cryptography.hazmat.primitives.asymmetric import rsa
import pytest
import sympy

from rsapem.keys import RsaPrivateKey

TARGET_SIZES = [1024, 2048, 3072, pytest.param(4096, marks=pytest.mark.slow)]
_known_keys: dict[int, rsa.RSAPrivateKey] = {}


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


def known_key(size: int) -> rsa.RSAPrivateKey:
    """A backend key of the given size, generated once per session."""
    if size not in _known_keys:
        _known_keys[size] = rsa.generate_private_key(public_exponent=65537, key_size=size)
    return _known_keys[size]


def small_key(bits: int = 128, e: int = 65537, reduce_by_lcm: bool = True) -> RsaPrivateKey:
    """A toy key built from sympy primes, for codec-only tests."""
    while True:
        p = sympy.randprime(2**(bits // 2 - 1), 2**(bits // 2))
        q = sympy.randprime(2**(bits // 2 - 1), 2**(bits // 2))
        lam = math.lcm(p - 1, q - 1)
        if p != q and math.gcd(e, lam) == 1 and e < lam:
            break
    d = pow(e, -1, lam if reduce_by_lcm else (p - 1) * (q - 1))
    return RsaPrivateKey(p * q, d, p, q)


@pytest.fixture(scope="session", params=TARGET_SIZES)
def keyset(request) -> rsa.RSAPrivateKey:
    return known_key(request.param)


@pytest.fixture(scope="session")
def key2048() -> rsa.RSAPrivateKey:
    return known_key(2048)


@pytest.fixture(name="make_small_key")
def fixture_make_small_key():
    return small_key
