"""The DER subset needed for RSA keys: INTEGER, SEQUENCE, BIT STRING, OCTET STRING, OBJECT IDENTIFIER and NULL.

Tag-length-value handling is left to pyasn1 in schemaless mode, the decoded objects are then converted into
small immutable node classes so that the key mapper can dispatch on structure with plain pattern matching.

Typical usage example:

    node, rest = decode(der_bytes)
    match node:
        case Sequence(elements=(Integer(), *_)):
            ...
    der_bytes = encode(Sequence((Integer(n), Integer(e))))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import typing

from pyasn1 import error
from pyasn1.codec.ber import decoder as ber_decoder
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import univ

from rsapem.errors import MalformedDerError


@dataclasses.dataclass(frozen=True)
class Integer:
    value: int


@dataclasses.dataclass(frozen=True)
class Sequence:
    elements: tuple["DerValue", ...] = ()

    def __len__(self) -> int:
        return len(self.elements)


@dataclasses.dataclass(frozen=True)
class BitString:
    """A BIT STRING, with the content octets after the unused-bits byte.

    Attributes:
        data: The content octets.
        unused_bits: Number of unused trailing bits in the last octet, 0-7.
    """
    data: bytes
    unused_bits: int = 0

    def __post_init__(self):
        if not 0 <= self.unused_bits <= 7 or (self.unused_bits and not self.data):
            raise ValueError("Unused bit count must be in range [0, 7] and 0 for an empty BIT STRING")


@dataclasses.dataclass(frozen=True)
class OctetString:
    data: bytes


@dataclasses.dataclass(frozen=True)
class ObjectIdentifier:
    components: tuple[int, ...]

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)


@dataclasses.dataclass(frozen=True)
class Null:
    pass


DerValue = Integer | Sequence | BitString | OctetString | ObjectIdentifier | Null

_T = typing.TypeVar("_T", Integer, Sequence, BitString, OctetString, ObjectIdentifier, Null)


class _EmptyConstructedMixin:
    """Yields an empty value, not None, for a SEQUENCE or SET without components.

    pyasn1 only picks a container type once it has seen a component, so on its own an empty constructed value
    comes back as None, and an enclosing container then fails on it.
    """

    def _decodeComponentsSchemaless(self, substrate, tagSet=None, decodeFun=None, length=None, **options):
        for asn1Object in super()._decodeComponentsSchemaless(substrate,
                                                              tagSet=tagSet,
                                                              decodeFun=decodeFun,
                                                              length=length,
                                                              **options):
            if asn1Object is None:
                asn1Object = self.protoRecordComponent.clone(tagSet=tagSet).clear()
            yield asn1Object


class _SequenceDecoder(_EmptyConstructedMixin, ber_decoder.SequenceOrSequenceOfPayloadDecoder):
    pass


class _SetDecoder(_EmptyConstructedMixin, ber_decoder.SetOrSetOfPayloadDecoder):
    pass


class _SingleItemDecoder(decoder.SingleItemDecoder):
    TAG_MAP = {
        **decoder.TAG_MAP,
        univ.Sequence.tagSet: _SequenceDecoder(),
        univ.Set.tagSet: _SetDecoder(),
    }


class _StreamingDecoder(decoder.StreamingDecoder):
    SINGLE_ITEM_DECODER = _SingleItemDecoder


class _Decoder(decoder.Decoder):
    STREAMING_DECODER = _StreamingDecoder


_decode = _Decoder()


def _from_asn1(node) -> DerValue:
    """Converts a schemaless pyasn1 object into a DerValue."""
    tags = node.tagSet
    if tags == univ.Integer.tagSet:
        return Integer(int(node))
    if tags == univ.Sequence.tagSet:
        return Sequence(tuple(_from_asn1(node.getComponentByPosition(idx)) for idx in range(len(node))))
    if tags == univ.BitString.tagSet:
        unused = -len(node) % 8
        return BitString((node.asInteger() << unused).to_bytes((len(node) + unused) // 8, "big"), unused)
    if tags == univ.OctetString.tagSet:
        return OctetString(node.asOctets())
    if tags == univ.ObjectIdentifier.tagSet:
        return ObjectIdentifier(node.asTuple())
    if tags == univ.Null.tagSet:
        return Null()
    raise MalformedDerError(f"Unsupported ASN.1 type {node.__class__.__name__}")


def _to_asn1(value: DerValue):
    """Converts a DerValue into the matching pyasn1 object."""
    match value:
        case Integer(number):
            return univ.Integer(number)
        case Sequence(elements):
            seq = univ.Sequence().clear()
            for idx, child in enumerate(elements):
                seq.setComponentByPosition(idx, _to_asn1(child))
            return seq
        case BitString(data, unused):
            return univ.BitString.fromOctetString(data, padding=unused)
        case OctetString(data):
            return univ.OctetString(data)
        case ObjectIdentifier(components):
            return univ.ObjectIdentifier(components)
        case Null():
            return univ.Null("")
    raise TypeError(f"Cannot encode {value!r} as DER")


def decode(data: bytes) -> tuple[DerValue, bytes]:
    """Decodes one DER node from the start of the buffer.

    Args:
        data: The DER bytes.

    Returns:
        The decoded node and whatever bytes follow it.

    Raises:
        MalformedDerError: If the buffer is truncated, a length overruns it, or a tag is outside the subset.
    """
    try:
        node, rest = _decode(bytes(data))
    except error.PyAsn1Error as exc:
        raise MalformedDerError(f"Invalid DER data: {exc}") from exc
    return _from_asn1(node), bytes(rest)


def encode(value: DerValue) -> bytes:
    """Encodes a node into DER.

    INTEGERs get the minimal two's complement form, so a leading zero octet appears only when the top bit of
    the first content octet is set. Lengths below 128 use the short form.

    Args:
        value: The node to encode.

    Returns:
        The DER bytes.
    """
    return encoder.encode(_to_asn1(value))


def expect(value: DerValue, kind: type[_T], what: str = "value") -> _T:
    """Checks the variant of a decoded node.

    Args:
        value: The node.
        kind: The expected DerValue class.
        what: Name of the field, used in the error message.

    Returns:
        The node, typed as `kind`.

    Raises:
        MalformedDerError: If the node is of another variant.
    """
    if not isinstance(value, kind):
        raise MalformedDerError(f"Expected {kind.__name__} for {what}, found {type(value).__name__}")
    return value


def element(seq: Sequence, idx: int, kind: type[_T], what: str | None = None) -> _T:
    """Fetches a sequence element of a given variant.

    Raises:
        MalformedDerError: If the sequence is too short or the element is of another variant.
    """
    what = what or f"element {idx}"
    if idx >= len(seq.elements):
        raise MalformedDerError(f"Sequence has {len(seq.elements)} elements, {what} needs at least {idx + 1}")
    return expect(seq.elements[idx], kind, what)
