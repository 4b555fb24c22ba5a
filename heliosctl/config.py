# =============================================================================
# heliosctl Library – Network and protocol constants
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

"""Process-wide protocol constants. Never mutated at runtime."""

# ---- Ports ----
TCP_PORT = 50630   # HTTP control server on every fixture
UDP_PORT = 50632   # discovery queries and InfoReply answers

# ---- Discovery ----
BROADCAST_ADDR = "255.255.255.255"
BROADCAST_MAC = "FF:FF:FF:FF:FF:FF"
SCAN_WINDOW_S = 4.0
RECV_BUFFER_SIZE = 4096
RECV_POLL_S = 0.25

# ---- UDP packet layout ----
MAGIC = b"HELIOS"
MAGIC_LEN = 6
MAC_LEN = 6
COMMAND_OFFSET = 12
LENGTH_OFFSET = 14
PAYLOAD_OFFSET = 16
MAX_PAYLOAD_LEN = 0xFFFF

# ---- HTTP ----
HTTP_TIMEOUT_S = 5.0
DIAGNOSTIC_PATH = "/diag.xml"
STATUS_PATH = "/status.xml"
INTENSITY_PATH = "/intensity.cgi"
