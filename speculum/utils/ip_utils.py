"""
Client IP helpers used for rate limiting and comment audit data.
"""

import ipaddress

from fastapi import Request

# nginx runs on the same host; only loopback may set X-Real-IP
TRUSTED_PROXIES = frozenset(
    [ipaddress.ip_address("127.0.0.1"), ipaddress.ip_address("::1")]
)


def is_trusted_proxy(client_ip: str) -> bool:
    try:
        return ipaddress.ip_address(client_ip) in TRUSTED_PROXIES
    except ValueError:
        return False


def get_client_ip(request: Request) -> str:
    """
    Client IP of the request.

    X-Real-IP is honoured only when the direct peer is a trusted proxy,
    otherwise the socket address is used.
    """
    direct_ip = request.client.host if request.client else "unknown"

    if is_trusted_proxy(direct_ip):
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    return direct_ip


def normalize_ip(ip: str) -> str:
    """
    Map equivalent addresses to one key.

    ::1 becomes 127.0.0.1 and IPv4-mapped IPv6 addresses become plain IPv4,
    so dual-stack clients share a rate limit bucket.
    """
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return ip

    if isinstance(addr, ipaddress.IPv6Address):
        if addr == ipaddress.IPv6Address("::1"):
            return "127.0.0.1"
        if addr.ipv4_mapped:
            return str(addr.ipv4_mapped)

    return str(addr)
