"""Exception types raised by the PEM and DER layers."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class FormatError(ValueError):
    """The PEM text could not be turned into DER bytes.

    Raised when the base64 body fails to decode or, in strict mode, when the BEGIN/END markers are missing
    or do not agree.
    """


class MalformedDerError(ValueError):
    """The DER payload does not have the structure of an RSA key.

    Covers truncated or over-long lengths, unexpected tags, sequences with too few elements and decoded
    values that cannot form a valid key.
    """
