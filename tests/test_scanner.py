import socket
import sys
import threading
import time
from ipaddress import IPv4Address

import pytest

from heliosctl.config import BROADCAST_ADDR, UDP_PORT
from heliosctl.exceptions import HeliosMalformedReplyError, HeliosTransportError
from heliosctl.wire import Command, encode_command
from helio_scanner import scanner
from helio_scanner.scanner import accept_datagram, scan_udp, scan_window

from .payloads import (
    DEVICE_INFO_XML,
    FakeRecvSocket,
    FakeSendSocket,
    device_info_xml,
    info_reply,
)


FIXTURE_ADDR = ("192.168.1.8", UDP_PORT)


@pytest.fixture
def fake_sockets(monkeypatch):
    """
    Replace the scanner socket pair; returns a function that loads the
    datagrams the fake network will deliver.
    """
    holder = {}

    def _install(datagrams=(), send_fails=False):
        holder["send"] = FakeSendSocket(fail=send_fails)
        holder["recv"] = FakeRecvSocket(datagrams)
        monkeypatch.setattr(scanner, "_open_sockets", lambda port: (holder["send"], holder["recv"]))
        return holder

    return _install


def test_accept_datagram():
    info = accept_datagram(info_reply(), FIXTURE_ADDR)
    assert info.serial_num == "fcaaaaaaaaaa"
    assert info.ip_addr == IPv4Address("192.168.1.8")


def test_reject_wrong_source_port():
    with pytest.raises(HeliosMalformedReplyError):
        accept_datagram(info_reply(), ("192.168.1.8", 40000))


@pytest.mark.parametrize("size", [0, 12, 16])
def test_reject_short_datagram(size):
    with pytest.raises(HeliosMalformedReplyError):
        accept_datagram(info_reply()[:size], FIXTURE_ADDR)


def test_reject_wrong_command():
    with pytest.raises(HeliosMalformedReplyError):
        accept_datagram(info_reply(command=0x00), FIXTURE_ADDR)


def test_reject_undecodable_xml():
    with pytest.raises(HeliosMalformedReplyError):
        accept_datagram(info_reply("<HelioDevice><SerialNr>x</HelioDevice>"), FIXTURE_ADDR)


def test_reject_invalid_utf8():
    with pytest.raises(HeliosMalformedReplyError):
        accept_datagram(info_reply()[:16] + b"\xff\xfe<a/>", FIXTURE_ADDR)


def test_accept_nul_padded_reply():
    info = accept_datagram(info_reply() + b"\x00\x00", FIXTURE_ADDR)
    assert info.serial_num == "fcaaaaaaaaaa"


def test_scan_window():
    assert scan_window(None) == 4.0
    assert scan_window(30) == 4.0
    assert scan_window(1.5) == 1.5
    assert scan_window(-1) == 0.0


def test_scan_sends_broadcast_query(fake_sockets):
    sockets = fake_sockets()

    assert scan_udp(0.2) == []

    assert sockets["send"].sent == [
        (encode_command(Command.QUERY, "FF:FF:FF:FF:FF:FF"), (BROADCAST_ADDR, UDP_PORT))
    ]
    assert sockets["send"].closed
    assert sockets["recv"].closed


def test_scan_without_responders_uses_full_window(fake_sockets, monkeypatch):
    monkeypatch.setattr(scanner, "SCAN_WINDOW_S", 0.3)
    fake_sockets()

    started = time.monotonic()
    assert scan_udp() == []
    assert time.monotonic() - started >= 0.3


def test_scan_deduplicates_by_serial(fake_sockets):
    fake_sockets([
        (info_reply(device_info_xml("serial-a", "192.168.1.8")), ("192.168.1.8", UDP_PORT)),
        (info_reply(device_info_xml("serial-a", "192.168.1.8")), ("192.168.1.8", UDP_PORT)),
        (info_reply(device_info_xml("serial-b", "192.168.1.9")), ("192.168.1.9", UDP_PORT)),
    ])

    devices = scan_udp(0.5)

    assert [d.serial_num for d in devices] == ["serial-a", "serial-b"]
    assert devices[1].ip_addr == IPv4Address("192.168.1.9")


def test_scan_drops_malformed_datagrams(fake_sockets):
    fake_sockets([
        (info_reply()[:10], FIXTURE_ADDR),
        (info_reply(command=0x00), FIXTURE_ADDR),
        (info_reply(), ("192.168.1.8", 1234)),
        (info_reply("not xml"), FIXTURE_ADDR),
        (info_reply(DEVICE_INFO_XML), FIXTURE_ADDR),
    ])

    devices = scan_udp(0.5)

    assert len(devices) == 1
    assert devices[0].serial_num == "fcaaaaaaaaaa"


def test_scan_cancel_event_stops_early(fake_sockets):
    fake_sockets()
    cancel = threading.Event()
    timer = threading.Timer(0.1, cancel.set)

    started = time.monotonic()
    timer.start()
    try:
        assert scan_udp(4.0, cancel) == []
    finally:
        timer.cancel()
    assert time.monotonic() - started < 2.0


def test_scan_bind_failure(monkeypatch):
    def _fail(port):
        raise OSError("address already in use")

    monkeypatch.setattr(scanner, "_open_sockets", _fail)
    with pytest.raises(HeliosTransportError):
        scan_udp(0.1)


def test_scan_send_failure_closes_sockets(fake_sockets):
    sockets = fake_sockets(send_fails=True)

    with pytest.raises(HeliosTransportError):
        scan_udp(0.1)
    assert sockets["send"].closed
    assert sockets["recv"].closed


def _free_udp_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
    finally:
        sock.close()


@pytest.mark.skipif(sys.platform != "linux", reason="needs the whole 127.0.0.0/8 loopback range")
def test_scan_over_loopback_sockets():
    port = _free_udp_port()
    result = {}

    def _run_scan():
        result["devices"] = scan_udp(0.6, broadcast_addr="127.0.0.1", port=port)

    scan_thread = threading.Thread(target=_run_scan)
    scan_thread.start()
    time.sleep(0.2)

    # A fixture answers from the discovery port, on its own loopback address
    fixture = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    fixture.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    stray = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        fixture.bind(("127.0.0.2", port))
        fixture.sendto(info_reply(device_info_xml("serial-ok")), ("127.0.0.1", port))
        stray.sendto(info_reply(device_info_xml("serial-stray")), ("127.0.0.1", port))
        scan_thread.join(5)
    finally:
        fixture.close()
        stray.close()

    assert not scan_thread.is_alive()
    assert [d.serial_num for d in result["devices"]] == ["serial-ok"]

    # The discovery port is free again: both scan sockets were closed
    rebind = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        rebind.bind(("", port))
    finally:
        rebind.close()
