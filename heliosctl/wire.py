# =============================================================================
# heliosctl Library – UDP wire codec
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Feránandez Rodríguez. All rights reserved.
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose and noninfringement. In no event shall the
# authors or copyright holders be liable for any claim, damages or other
# liability, whether in an action of contract, tort or otherwise, arising from,
# out of or in connection with the software or the use or other dealings in the
# software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
#  @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Tuple, Union

from .config import (
    COMMAND_OFFSET,
    LENGTH_OFFSET,
    MAC_LEN,
    MAGIC,
    MAX_PAYLOAD_LEN,
    PAYLOAD_OFFSET,
)
from .exceptions import HeliosEncodingError, HeliosFormatError


_MAC_RE = re.compile(r"^[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$")
_CHANNEL_RE = re.compile(r"[0-9]+")


class Command(IntEnum):
    """
    UDP command codes understood by the fixtures.

    QUERY asks every fixture on the segment to identify itself; fixtures
    answer with INFO_REPLY and an XML description in the payload.
    """

    QUERY = 0
    INFO_REPLY = 6


@dataclass(frozen=True)
class WavelengthDescription:
    """
    One light channel of a fixture.

    Attributes:
        number: Channel index as declared by the firmware.
        wavelength: Wavelength label, e.g. "450nm", or a colour temperature
                    such as "5700K" for white channels.
        power: Rated power label, e.g. "10.2W".
    """

    number: int
    wavelength: str
    power: str


class WavelengthList(Tuple[WavelengthDescription, ...]):
    """
    Ordered channels of a fixture.

    The order is meaningful: position N in an intensity request drives the
    N-th channel of this list.
    """

    def __new__(cls, items: Iterable[WavelengthDescription] = ()) -> "WavelengthList":
        return super().__new__(cls, tuple(items))

    @property
    def channel_count(self) -> int:
        return len(self)

    def __repr__(self) -> str:
        return f"WavelengthList({list(self)!r})"


def command_byte(command: int) -> int:
    """
    Render a command code as the byte the firmware expects.

    The code is printed as two zero-padded decimal digits and those digits
    are read back as one hex byte, so 6 -> 0x06 but 10 -> 0x10. Fixtures
    only understand this form.

    Raises:
        HeliosEncodingError: if the code is outside 0-99.
    """
    digits = "%02d" % int(command)
    try:
        encoded = bytes.fromhex(digits)
    except ValueError as exc:
        raise HeliosEncodingError(f"Cannot encode command {command!r}: {exc}") from exc
    if len(encoded) != 1:
        raise HeliosEncodingError(f"Command {command!r} does not fit in one byte")
    return encoded[0]


def parse_hardware_address(address: Union[str, bytes]) -> bytes:
    """
    Convert a MAC literal ('64:1A:10:10:10:10' or '64-1a-...') into 6 bytes.

    Raw 6-byte values are accepted as-is.

    Raises:
        HeliosEncodingError: if the value is not a 6-octet hardware address.
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != MAC_LEN:
            raise HeliosEncodingError(
                f"Hardware address must be {MAC_LEN} bytes, got {len(address)}"
            )
        return bytes(address)

    if not isinstance(address, str) or not _MAC_RE.match(address.strip()):
        raise HeliosEncodingError(f"Invalid hardware address {address!r}")
    return bytes.fromhex(re.sub(r"[:-]", "", address.strip()))


def encode_command(
    command: int,
    hardware_address: Union[str, bytes],
    payload: Optional[bytes] = None,
) -> bytes:
    """
    Build a UDP command packet.

    Layout:
        MAGIC (6) | hardware address (6) | command (1) | 0x00 (1) |
        payload length, little endian (2) | payload

    Args:
        command: Command code (0-99), usually a `Command` member.
        hardware_address: Target MAC, or BROADCAST_MAC for every fixture.
        payload: Optional payload bytes.

    Returns:
        The packet bytes.

    Raises:
        HeliosEncodingError: on an invalid MAC, command or payload size.
    """
    mac = parse_hardware_address(hardware_address)
    cmd = command_byte(command)

    body = bytes(payload or b"")
    if len(body) > MAX_PAYLOAD_LEN:
        raise HeliosEncodingError(
            f"Payload of {len(body)} bytes exceeds {MAX_PAYLOAD_LEN}"
        )

    packet = bytearray(MAGIC)
    packet += mac
    packet.append(cmd)
    packet.append(0)
    packet.append(len(body) % 256)
    packet.append(len(body) // 256)
    packet += body
    return bytes(packet)


def parse_packet_header(data: bytes) -> Tuple[int, int, bytes]:
    """
    Split a received packet into (command byte, declared length, payload).

    The payload is everything from the payload offset onward; the declared
    length is reported but not enforced, fixtures are not consistent about it.

    Raises:
        ValueError: if the packet is shorter than the fixed header.
    """
    if len(data) < PAYLOAD_OFFSET:
        raise ValueError(f"packet of {len(data)} bytes is shorter than the header")
    length = data[LENGTH_OFFSET] | (data[LENGTH_OFFSET + 1] << 8)
    return data[COMMAND_OFFSET], length, bytes(data[PAYLOAD_OFFSET:])


def decode_wavelength_list(raw: str) -> WavelengthList:
    """
    Decode the compact wavelength notation used in diag.xml.

    Example:
        "0:450nm:10.2W,1:660nm:5.2W," ->
            (WavelengthDescription(0, "450nm", "10.2W"),
             WavelengthDescription(1, "660nm", "5.2W"))

    One trailing comma is dropped, then every comma-separated segment must
    hold exactly `number:wavelength:power` with an unsigned decimal number.

    Raises:
        HeliosFormatError: on any malformed segment; nothing is returned
        partially.
    """
    text = raw[:-1] if raw.endswith(",") else raw

    items = []
    for segment in text.split(","):
        fields = segment.split(":")
        if len(fields) != 3:
            raise HeliosFormatError(
                f"Invalid wavelength segment {segment!r}: expected 3 fields, got {len(fields)}"
            )
        number, wavelength, power = fields
        if not _CHANNEL_RE.fullmatch(number):
            raise HeliosFormatError(f"Invalid channel number {number!r} in {segment!r}")
        items.append(WavelengthDescription(number=int(number), wavelength=wavelength, power=power))

    return WavelengthList(items)
