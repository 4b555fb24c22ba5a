from ipaddress import IPv4Address

import pytest

from heliosctl.exceptions import HeliosFormatError, HeliosProtocolError
from heliosctl.models import DeviceInfo, Diagnostic, Status
from heliosctl.wire import WavelengthDescription, WavelengthList

from .payloads import DEVICE_INFO_XML, DIAG_XML, STATUS_XML


def test_device_info_from_xml():
    di = DeviceInfo.from_xml(DEVICE_INFO_XML)
    assert di == DeviceInfo(
        mac="64:1A:10:10:10:10",
        dhcp=True,
        ip_addr=IPv4Address("192.168.1.8"),
        net_mask="255.255.255.0",
        gateway=IPv4Address("192.168.1.1"),
        dns1=IPv4Address("192.168.1.1"),
        dns2=IPv4Address("0.0.0.0"),
        fw_version="R2.2.25",
        serial_num="fcaaaaaaaaaa",
    )


def test_device_info_absent_fields_are_zero_values():
    di = DeviceInfo.from_xml(b"<HelioDevice><SerialNr>abc</SerialNr></HelioDevice>")
    assert di.serial_num == "abc"
    assert di.mac == ""
    assert di.dhcp is False
    assert di.ip_addr is None


@pytest.mark.parametrize("value, expected", [("1", True), ("True", True), ("false", False), ("0", False), (" true ", True)])
def test_device_info_dhcp_flag(value, expected):
    di = DeviceInfo.from_xml(f"<d><DHCP>{value}</DHCP></d>")
    assert di.dhcp is expected


@pytest.mark.parametrize(
    "xml",
    [
        "<d><DHCP>maybe</DHCP></d>",
        "<d><IPAddress>192.168.1.300</IPAddress></d>",
        "<d><MACAddress>unterminated</d>",
        '{"some":"json"}',
    ],
)
def test_device_info_invalid(xml):
    with pytest.raises(HeliosProtocolError):
        DeviceInfo.from_xml(xml)


def test_diagnostic_from_xml():
    diag = Diagnostic.from_xml(DIAG_XML.encode("utf-8"))
    assert diag.model == "L4"
    assert diag.cpu_fw == "R2.2.25"
    assert diag.wlan_mac == ""
    assert diag.wavelengths == WavelengthList([
        WavelengthDescription(0, "450nm", "10.2W"),
        WavelengthDescription(1, "660nm", "5.2W"),
        WavelengthDescription(2, "735nm", "10.0W"),
        WavelengthDescription(3, "5700K", "6.0W"),
    ])
    assert diag.channel_count == 4
    assert diag.latest_change == "2017-03-17\t02:06:25"
    assert diag.use_ntp == 1
    assert diag.network_ip == IPv4Address("192.168.1.8")
    assert diag.network_subnet == IPv4Address("255.255.255.0")
    assert diag.network_dns2 == IPv4Address("0.0.0.0")
    assert diag.wlan_ip is None
    assert diag.ethernet_ip == IPv4Address("192.168.1.8")
    assert diag.masters == " "
    assert diag.lock_data == "off:Enter your message here:heliospectra"
    assert diag.multicast_ip == "239.153.155.131"
    assert diag.tags == "0|^|name|^||~|"


def test_diagnostic_without_wavelengths_is_empty_list():
    diag = Diagnostic.from_xml("<diagnostic><model>L4</model></diagnostic>")
    assert diag.wavelengths == WavelengthList()
    assert diag.channel_count == 0


def test_diagnostic_malformed_wavelengths_fail_whole_document():
    xml = DIAG_XML.replace("1:660nm:5.2W,", "1:660nm,")
    with pytest.raises(HeliosFormatError):
        Diagnostic.from_xml(xml)


def test_diagnostic_bad_use_ntp():
    with pytest.raises(HeliosProtocolError):
        Diagnostic.from_xml("<diagnostic><useNTP>-1</useNTP></diagnostic>")


def test_diagnostic_not_xml():
    with pytest.raises(HeliosProtocolError):
        Diagnostic.from_xml(b'{"some":"json"}')


def test_status_from_xml():
    status = Status.from_xml(STATUS_XML)
    assert status == Status(
        internal_time="2017:03:17:19:07:56",
        on_schedule="Not running",
        status="OK",
        uptime="0d 02h 39m 37s",
        last_change_at="2017-03-17\t18:58:34",
        last_change_interface="Web",
        last_change_by=IPv4Address("192.168.1.3"),
        last_change_type="Light setting",
        temp="0:26.0C,",
        intensities="0:0,1:0,2:0,3:0,",
        masters=" ",
        reserved=" ",
        control_mode="Independent",
        ntp_time_settings="on, pool.ntp.org, 00:00:00",
    )


def test_status_not_xml():
    with pytest.raises(HeliosProtocolError):
        Status.from_xml('{"some":"json"}')


def test_models_are_immutable():
    di = DeviceInfo.from_xml(DEVICE_INFO_XML)
    with pytest.raises(AttributeError):
        di.serial_num = "other"
