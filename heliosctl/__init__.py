from .client import HeliosDevice, default_session, format_intensities
from .models import DeviceInfo, Diagnostic, Status
from .wire import (
    Command,
    WavelengthDescription,
    WavelengthList,
    decode_wavelength_list,
    encode_command,
)
from .exceptions import (
    HeliosError,
    HeliosEncodingError,
    HeliosTransportError,
    HeliosStatusError,
    HeliosProtocolError,
    HeliosFormatError,
    HeliosMalformedReplyError,
)

__all__ = [
    "HeliosDevice",
    "default_session",
    "format_intensities",
    "DeviceInfo",
    "Diagnostic",
    "Status",
    "Command",
    "WavelengthDescription",
    "WavelengthList",
    "decode_wavelength_list",
    "encode_command",
    "HeliosError",
    "HeliosEncodingError",
    "HeliosTransportError",
    "HeliosStatusError",
    "HeliosProtocolError",
    "HeliosFormatError",
    "HeliosMalformedReplyError",
]
