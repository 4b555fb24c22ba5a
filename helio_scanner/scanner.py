# =============================================================================
# Heliospectra UDP Discovery Library
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

import logging
import queue
import socket
import threading
import time
from typing import List, Optional, Set, Tuple

from heliosctl.config import (
    BROADCAST_ADDR,
    BROADCAST_MAC,
    PAYLOAD_OFFSET,
    RECV_BUFFER_SIZE,
    RECV_POLL_S,
    SCAN_WINDOW_S,
    UDP_PORT,
)
from heliosctl.exceptions import (
    HeliosMalformedReplyError,
    HeliosProtocolError,
    HeliosTransportError,
)
from heliosctl.models import DeviceInfo
from heliosctl.wire import Command, command_byte, encode_command, parse_packet_header

_LOGGER = logging.getLogger(__name__)

_INFO_REPLY_BYTE = command_byte(Command.INFO_REPLY)


def scan_window(timeout_s: Optional[float] = None) -> float:
    """
    Length of a scan in seconds: SCAN_WINDOW_S, or less if the caller asks.
    """
    if timeout_s is None:
        return SCAN_WINDOW_S
    return max(0.0, min(float(timeout_s), SCAN_WINDOW_S))


def accept_datagram(data: bytes, addr: Tuple[str, int], port: int = UDP_PORT) -> DeviceInfo:
    """
    Validate one received datagram and decode its InfoReply payload.

    Checks, in order:
      1) the sender used the discovery port
      2) the datagram is longer than the fixed header
      3) the command byte is INFO_REPLY
      4) the payload is a UTF-8 XML DeviceInfo document; trailing NUL
         padding after the root element is ignored

    Args:
        data: Raw datagram.
        addr: (host, port) of the sender.
        port: Expected source port.

    Returns:
        The decoded DeviceInfo.

    Raises:
        HeliosMalformedReplyError if any check fails.
    """
    if addr[1] != port:
        raise HeliosMalformedReplyError(f"unexpected source port {addr[1]}")
    if len(data) <= PAYLOAD_OFFSET:
        raise HeliosMalformedReplyError(f"datagram too short ({len(data)} bytes)")

    command, _, payload = parse_packet_header(data)
    if command != _INFO_REPLY_BYTE:
        raise HeliosMalformedReplyError(f"unexpected command byte 0x{command:02x}")

    try:
        return DeviceInfo.from_xml(payload.rstrip(b"\x00").decode("utf-8"))
    except (UnicodeDecodeError, HeliosProtocolError) as exc:
        _LOGGER.warning("Undecodable InfoReply from %s: %s", addr[0], exc)
        raise HeliosMalformedReplyError(f"undecodable InfoReply: {exc}") from exc


def _open_sockets(port: int) -> Tuple[socket.socket, socket.socket]:
    """
    Open the (send, receive) socket pair used by one scan.

    The receive socket is bound to the discovery port; the send socket is an
    ephemeral broadcast-enabled socket.
    """
    recv_sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        recv_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        recv_sock.bind(("", port))
        recv_sock.settimeout(RECV_POLL_S)

        send_sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        send_sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError:
        recv_sock.close()
        raise
    return send_sock, recv_sock


def _receive_loop(
    sock: socket.socket,
    records: "queue.Queue[DeviceInfo]",
    stop: threading.Event,
    port: int,
) -> None:
    """
    Reader thread: push every accepted DeviceInfo onto `records`.

    Ends when `stop` is set or the socket fails (including being closed).
    """
    while not stop.is_set():
        try:
            data, addr = sock.recvfrom(RECV_BUFFER_SIZE)
        except socket.timeout:
            continue
        except OSError as exc:
            _LOGGER.debug("Discovery receive loop ended: %s", exc)
            return

        try:
            info = accept_datagram(data, addr, port=port)
        except HeliosMalformedReplyError as exc:
            _LOGGER.debug("Dropped datagram from %s:%s: %s", addr[0], addr[1], exc)
            continue

        records.put(info)


def _aggregate(
    records: "queue.Queue[DeviceInfo]",
    deadline: float,
    cancel_event: threading.Event,
) -> List[DeviceInfo]:
    """
    Collect records until `deadline` (time.monotonic) or cancellation.

    Only the first record of each serial number is kept; arrival order is
    preserved.
    """
    devices: List[DeviceInfo] = []
    seen: Set[str] = set()

    while not cancel_event.is_set():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        try:
            info = records.get(timeout=min(remaining, RECV_POLL_S))
        except queue.Empty:
            continue

        if info.serial_num in seen:
            _LOGGER.debug("Duplicate reply from %s (serial %s)", info.ip_addr, info.serial_num)
            continue

        seen.add(info.serial_num)
        devices.append(info)
        _LOGGER.info(
            "Discovered Heliospectra fixture %s at %s (fw %s)",
            info.serial_num,
            info.ip_addr,
            info.fw_version,
        )

    return devices


def scan_udp(
    timeout_s: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    *,
    broadcast_addr: str = BROADCAST_ADDR,
    port: int = UDP_PORT,
) -> List[DeviceInfo]:
    """
    Broadcast a discovery query and collect the fixtures that answer.

    Args:
        timeout_s: Upper bound of the scan; the scan never listens longer than
            SCAN_WINDOW_S.
        cancel_event: Optional event; setting it ends the scan early and the
            devices collected so far are returned.
        broadcast_addr: Destination of the query.
        port: Discovery port, used for both the query and the replies.

    Returns:
        One DeviceInfo per serial number, in arrival order. An empty list
        means nobody answered.

    Raises:
        HeliosTransportError if the sockets cannot be opened or the query
        cannot be sent.
    """
    deadline = time.monotonic() + scan_window(timeout_s)
    cancel_event = cancel_event or threading.Event()
    query = encode_command(Command.QUERY, BROADCAST_MAC)

    try:
        send_sock, recv_sock = _open_sockets(port)
    except OSError as exc:
        raise HeliosTransportError(f"Unable to open discovery sockets on port {port}: {exc}") from exc

    records: "queue.Queue[DeviceInfo]" = queue.Queue()
    stop = threading.Event()
    reader = threading.Thread(
        target=_receive_loop,
        args=(recv_sock, records, stop, port),
        name="helio-scan-reader",
        daemon=True,
    )

    try:
        reader.start()
        try:
            send_sock.sendto(query, (broadcast_addr, port))
        except OSError as exc:
            raise HeliosTransportError(f"Unable to send discovery query to {broadcast_addr}:{port}: {exc}") from exc
        _LOGGER.debug("Sent discovery query to %s:%d", broadcast_addr, port)

        return _aggregate(records, deadline, cancel_event)

    finally:
        stop.set()
        reader.join(RECV_POLL_S * 2)
        send_sock.close()
        recv_sock.close()
