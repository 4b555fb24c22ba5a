# =============================================================================
# heliosctl Library – Response Models
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

import ipaddress
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional, Union

from .exceptions import HeliosFormatError, HeliosProtocolError
from .wire import WavelengthList, decode_wavelength_list

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_TRUE_WORDS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_WORDS = ("0", "f", "F", "FALSE", "false", "False")


# -----------------------------------------------------------------------------
# Element decoders
#
# Absent elements decode to the zero value of their field. A present element
# holding an unparsable value fails the whole document.
# -----------------------------------------------------------------------------

def _parse_root(data: Union[bytes, str]) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise HeliosProtocolError(f"Malformed XML document: {exc}") from exc


def _text(root: ET.Element, tag: str) -> str:
    node = root.find(tag)
    if node is None or node.text is None:
        return ""
    return node.text


def _uint(root: ET.Element, tag: str) -> int:
    raw = _text(root, tag).strip()
    if not raw:
        return 0
    if not (raw.isascii() and raw.isdigit()):
        raise HeliosProtocolError(f"<{tag}> is not an unsigned integer: {raw!r}")
    return int(raw)


def _bool(root: ET.Element, tag: str) -> bool:
    raw = _text(root, tag).strip()
    if not raw or raw in _FALSE_WORDS:
        return False
    if raw in _TRUE_WORDS:
        return True
    raise HeliosProtocolError(f"<{tag}> is not a boolean: {raw!r}")


def _ip(root: ET.Element, tag: str) -> Optional[IPAddress]:
    raw = _text(root, tag).strip()
    if not raw:
        return None
    try:
        return ipaddress.ip_address(raw)
    except ValueError as exc:
        raise HeliosProtocolError(f"<{tag}> is not an IP address: {raw!r}") from exc


def _wavelengths(root: ET.Element, tag: str) -> WavelengthList:
    node = root.find(tag)
    if node is None:
        return WavelengthList()
    try:
        return decode_wavelength_list(node.text or "")
    except HeliosFormatError as exc:
        raise HeliosFormatError(f"<{tag}>: {exc}") from exc


@dataclass(frozen=True)
class DeviceInfo:
    """
    Identity and network settings a fixture broadcasts in its InfoReply.

    Attributes:
        mac: Ethernet MAC address as reported (e.g. "64:1A:10:10:10:10").
        dhcp: True if the fixture obtained its address through DHCP.
        ip_addr: Current IP address, used to build a HeliosDevice.
        net_mask: Netmask as a dotted string.
        gateway: Default gateway.
        dns1, dns2: Configured DNS servers.
        fw_version: Firmware version string (e.g. "R2.2.25").
        serial_num: Serial number; unique per fixture.
    """

    mac: str = ""
    dhcp: bool = False
    ip_addr: Optional[IPAddress] = None
    net_mask: str = ""
    gateway: Optional[IPAddress] = None
    dns1: Optional[IPAddress] = None
    dns2: Optional[IPAddress] = None
    fw_version: str = ""
    serial_num: str = ""

    @classmethod
    def from_xml(cls, data: Union[bytes, str]) -> "DeviceInfo":
        """
        Decode the XML document carried by an InfoReply packet.

        Raises:
            HeliosProtocolError: if the document or one of its values is invalid.
        """
        root = _parse_root(data)
        return cls(
            mac=_text(root, "MACAddress"),
            dhcp=_bool(root, "DHCP"),
            ip_addr=_ip(root, "IPAddress"),
            net_mask=_text(root, "NetMask"),
            gateway=_ip(root, "Gateway"),
            dns1=_ip(root, "DNS1"),
            dns2=_ip(root, "DNS2"),
            fw_version=_text(root, "FwVersion"),
            serial_num=_text(root, "SerialNr"),
        )


@dataclass(frozen=True)
class Diagnostic:
    """
    Full state snapshot returned by /diag.xml.

    Most values are kept as the raw strings the firmware produces (clock,
    temperatures, intensities...). `wavelengths` is decoded so callers can
    size intensity requests from it.
    """

    model: str = ""
    cpu_fw: str = ""
    driver_fw: str = ""
    ethernet_mac: str = ""
    wlan_mac: str = ""
    wavelengths: WavelengthList = field(default_factory=WavelengthList)
    clock: str = ""
    on_schedule: str = ""
    master_or_slave: str = ""
    system_status: str = ""
    runtime: str = ""
    latest_change: str = ""
    changed_by: str = ""
    change_ip: str = ""
    change_type: str = ""
    temps: str = ""
    intensities: str = ""
    use_ntp: int = 0
    network_type: str = ""
    network_ip: Optional[IPAddress] = None
    network_subnet: Optional[IPAddress] = None
    network_gateway: Optional[IPAddress] = None
    network_dns1: Optional[IPAddress] = None
    network_dns2: Optional[IPAddress] = None
    allowed_temp: str = ""
    hs: str = ""
    title: str = ""
    wlan_ip: Optional[IPAddress] = None
    ethernet_ip: Optional[IPAddress] = None
    ntp_offset: str = ""
    masters: str = ""
    dialog: str = ""
    powered_link: str = ""
    powered_text: str = ""
    ntp_pool_type: str = ""
    ntp_pool_custom: str = ""
    favicon: str = ""
    temp_unit: str = ""
    lock_data: str = ""
    shortcuts: str = ""
    ntp_data: str = ""
    multicast_ip: str = ""
    tags: str = ""

    @property
    def channel_count(self) -> int:
        """Number of intensity values `set_intensities` expects."""
        return len(self.wavelengths)

    @classmethod
    def from_xml(cls, data: Union[bytes, str]) -> "Diagnostic":
        """
        Decode a /diag.xml document.

        Raises:
            HeliosProtocolError: malformed XML or an invalid value.
            HeliosFormatError: malformed <wavelengths> list.
        """
        root = _parse_root(data)
        return cls(
            model=_text(root, "model"),
            cpu_fw=_text(root, "cpuFW"),
            driver_fw=_text(root, "driverFW"),
            ethernet_mac=_text(root, "ethernetMAC"),
            wlan_mac=_text(root, "wlanMAC"),
            wavelengths=_wavelengths(root, "wavelengths"),
            clock=_text(root, "clock"),
            on_schedule=_text(root, "onSchedule"),
            master_or_slave=_text(root, "masterOrSlave"),
            system_status=_text(root, "systemStatus"),
            runtime=_text(root, "runtime"),
            latest_change=_text(root, "latestChange"),
            changed_by=_text(root, "changedBy"),
            change_ip=_text(root, "changeIP"),
            change_type=_text(root, "changeType"),
            temps=_text(root, "temps"),
            intensities=_text(root, "intensities"),
            use_ntp=_uint(root, "useNTP"),
            network_type=_text(root, "networkType"),
            network_ip=_ip(root, "networkIP"),
            network_subnet=_ip(root, "networkSubnet"),
            network_gateway=_ip(root, "networkGateway"),
            network_dns1=_ip(root, "networkDNS1"),
            network_dns2=_ip(root, "networkDNS2"),
            allowed_temp=_text(root, "allowedTemp"),
            hs=_text(root, "hs"),
            title=_text(root, "title"),
            wlan_ip=_ip(root, "wlanIP"),
            ethernet_ip=_ip(root, "ethernetIP"),
            ntp_offset=_text(root, "ntpOffset"),
            masters=_text(root, "masters"),
            dialog=_text(root, "dialog"),
            powered_link=_text(root, "poweredLink"),
            powered_text=_text(root, "poweredText"),
            ntp_pool_type=_text(root, "ntpPoolType"),
            ntp_pool_custom=_text(root, "ntpPoolCustom"),
            favicon=_text(root, "favicon"),
            temp_unit=_text(root, "tempUnit"),
            lock_data=_text(root, "lockData"),
            shortcuts=_text(root, "shortcuts"),
            ntp_data=_text(root, "ntpData"),
            multicast_ip=_text(root, "multicastIP"),
            tags=_text(root, "tags"),
        )


@dataclass(frozen=True)
class Status:
    """
    Narrower state snapshot returned by /status.xml.

    The firmware names the elements with single letters (<a> ... <t>); only
    the documented ones are mapped.
    """

    internal_time: str = ""
    on_schedule: str = ""
    status: str = ""
    uptime: str = ""
    last_change_at: str = ""
    last_change_interface: str = ""
    last_change_by: Optional[IPAddress] = None
    last_change_type: str = ""
    temp: str = ""
    intensities: str = ""
    masters: str = ""
    reserved: str = ""
    control_mode: str = ""
    ntp_time_settings: str = ""

    @classmethod
    def from_xml(cls, data: Union[bytes, str]) -> "Status":
        root = _parse_root(data)
        return cls(
            internal_time=_text(root, "a"),
            on_schedule=_text(root, "b"),
            status=_text(root, "c"),
            uptime=_text(root, "d"),
            last_change_at=_text(root, "e"),
            last_change_interface=_text(root, "f"),
            last_change_by=_ip(root, "g"),
            last_change_type=_text(root, "h"),
            temp=_text(root, "i"),
            intensities=_text(root, "j"),
            masters=_text(root, "k"),
            reserved=_text(root, "l"),
            control_mode=_text(root, "m"),
            ntp_time_settings=_text(root, "q"),
        )
