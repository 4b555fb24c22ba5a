# =============================================================================
# HeliosDevice - HTTP client for Heliospectra LED fixtures
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

import ipaddress
import operator
import logging
from functools import lru_cache
from typing import Dict, Iterable, Optional, Union

import requests

from .config import (
    DIAGNOSTIC_PATH,
    HTTP_TIMEOUT_S,
    INTENSITY_PATH,
    STATUS_PATH,
    TCP_PORT,
)
from .exceptions import HeliosStatusError, HeliosTransportError
from .models import DeviceInfo, Diagnostic, Status

_LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def default_session() -> requests.Session:
    """
    Shared HTTP transport used by every HeliosDevice built without a session.
    """
    return requests.Session()


def format_intensities(intensities: Iterable[int]) -> str:
    """
    Render intensities the way intensity.cgi expects them: `1:2:3:4`.

    Raises:
        TypeError: if a value is not an integer (floats are not truncated).
    """
    return ":".join("%d" % operator.index(value) for value in intensities)


class HeliosDevice:
    """
    Controller handle for one Heliospectra fixture.

    The fixture runs a small HTTP server on TCP_PORT exposing:
      - GET /diag.xml       full diagnostic snapshot
      - GET /status.xml     short status snapshot
      - GET /intensity.cgi  set channel intensities (`int=<i0:i1:...>`)

    Every call is a single request: no retries, no caching. The handle keeps
    no state besides its address and transport, so it can be shared between
    threads; requests are not serialized.
    """

    def __init__(
        self,
        address: Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address],
        session: Optional[requests.Session] = None,
        timeout_s: float = HTTP_TIMEOUT_S,
        port: int = TCP_PORT,
    ) -> None:
        """
        Create a HeliosDevice.

        Args:
            address:
                IP address of the fixture, usually `DeviceInfo.ip_addr` from a
                scan.
            session:
                Optional preconfigured requests.Session. If not provided, the
                process-wide `default_session()` is used.
            timeout_s:
                Default timeout in seconds applied to each request.
            port:
                TCP port of the fixture HTTP server.

        Raises:
            ValueError:
                If address is not an IP literal.
        """
        self.address = ipaddress.ip_address(str(address))
        self.session = session if session is not None else default_session()
        self.timeout_s = float(timeout_s)
        self.port = int(port)

    @classmethod
    def from_device_info(cls, info: DeviceInfo, **kwargs) -> "HeliosDevice":
        """
        Build a handle for a fixture found by a scan.

        Raises:
            ValueError: if the scan result carries no IP address.
        """
        if info.ip_addr is None:
            raise ValueError(f"Device {info.serial_num!r} reported no IP address")
        return cls(info.ip_addr, **kwargs)

    @property
    def base_url(self) -> str:
        """
        Base URL of the fixture, e.g. 'http://192.168.1.8:50630'.
        """
        host = str(self.address)
        if self.address.version == 6:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    def __repr__(self) -> str:
        return f"HeliosDevice({str(self.address)!r}, port={self.port})"

    def get_diagnostic(self, timeout_s: Optional[float] = None) -> Diagnostic:
        """
        Fetch and decode /diag.xml.

        Raises:
            HeliosTransportError: network failure or timeout.
            HeliosStatusError: the fixture did not answer 200.
            HeliosProtocolError: the body is not a valid diagnostic document
                (HeliosFormatError for a malformed wavelength list).
        """
        r = self._get(DIAGNOSTIC_PATH, timeout_s=timeout_s)
        return Diagnostic.from_xml(r.content)

    def get_status(self, timeout_s: Optional[float] = None) -> Status:
        """
        Fetch and decode /status.xml. Same error contract as get_diagnostic().
        """
        r = self._get(STATUS_PATH, timeout_s=timeout_s)
        return Status.from_xml(r.content)

    def set_intensities(self, *intensities: int, timeout_s: Optional[float] = None) -> None:
        """
        Set the intensity of every channel.

        Values are positional: the N-th value drives the N-th entry of
        `Diagnostic.wavelengths`. The count is not checked here; the fixture
        decides what to do with a mismatched request.

        Args:
            *intensities: One integer per channel.
            timeout_s: Optional per-call timeout.

        Raises:
            HeliosTransportError, HeliosStatusError
        """
        self._get(INTENSITY_PATH, params={"int": format_intensities(intensities)}, timeout_s=timeout_s)

    def _get(
        self,
        path: str,
        params: Optional[Dict[str, str]] = None,
        timeout_s: Optional[float] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        timeout = self.timeout_s if timeout_s is None else timeout_s

        _LOGGER.debug("GET %s params=%s", url, params)
        try:
            r = self.session.get(
                url,
                params=params,
                headers={"Connection": "close"},
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise HeliosTransportError(f"HTTP error on GET {url}: {exc}") from exc

        if r.status_code != 200:
            raise HeliosStatusError(
                f"Unexpected status code {r.status_code} from {url}",
                status_code=r.status_code,
            )

        _LOGGER.debug(
            "GET %s -> %d (%s)", url, r.status_code, r.headers.get("Content-Type", "?")
        )
        return r
