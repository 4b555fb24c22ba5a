from .scanner import accept_datagram, scan_udp

__all__ = ["accept_datagram", "scan_udp"]
