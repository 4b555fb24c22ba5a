# =============================================================================
# heliosctl Library – Exceptions Module
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Feránandez Rodríguez. All rights reserved.
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose, and non-infringement. In no event shall the
# authors or copyright holders be liable for any claim, damages, or other
# liability, whether in an action of contract, tort, or otherwise, arising from,
# out of, or in connection with the software or the use or other dealings in
# the software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license text should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
#  @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

from typing import Optional


class HeliosError(Exception):
    """
    Base exception for the library.

    Every exception raised by heliosctl and helio_scanner inherits from this
    class, so callers can catch `HeliosError` to handle any library failure
    in one place.
    """
    pass


class HeliosEncodingError(HeliosError):
    """
    A UDP command packet could not be built.

    Raised when:
      - The hardware address is not a 6-octet hex literal
      - The command code does not render as two decimal digits (0-99)
      - The payload does not fit the 16-bit length field
    """
    pass


class HeliosTransportError(HeliosError):
    """
    Errors related to the transport layer.

    This includes problems such as:
      - Network unreachable / connection refused
      - Request timeouts
      - UDP socket bind or send failures during a scan
    """
    pass


class HeliosStatusError(HeliosError):
    """
    The fixture answered an HTTP request with a status other than 200.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HeliosProtocolError(HeliosError):
    """
    A payload returned by the fixture cannot be decoded.

    Raised when:
      - The body is not well-formed XML
      - A numeric, boolean or IP address element holds an unparsable value
    """
    pass


class HeliosFormatError(HeliosProtocolError):
    """
    A wavelength list is malformed: a segment does not have exactly three
    colon-separated fields, or its channel number is not a small unsigned
    integer. The whole list is rejected.
    """
    pass


class HeliosMalformedReplyError(HeliosProtocolError):
    """
    A UDP datagram received during a scan is not a usable InfoReply.

    Only used inside the scanner: the datagram is dropped and the scan keeps
    listening.
    """
    pass
