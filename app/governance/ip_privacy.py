"""IP masking for non-privileged viewers. Applied once at write time; history is never re-masked."""

import re
from typing import Optional

MASKED_PLACEHOLDER = "masked"

_OCTET = r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
_IPV4_RE = re.compile(rf"^({_OCTET})\.({_OCTET})\.{_OCTET}\.{_OCTET}$")
# Hex groups, optional embedded IPv4 tail and zone index (fe80::1%eth0)
_IPV6_RE = re.compile(r"^[0-9A-Fa-f:]*:[0-9A-Fa-f:.]*(%[\w.\-]+)?$")


def mask_ip(ip_address: Optional[str]) -> Optional[str]:
    """
    IPv4 a.b.c.d -> a.b.*.*; IPv6 -> first two colon groups then :*; any other shape -> "masked".
    Absence stays absent.
    """
    if ip_address is None:
        return None
    ip = ip_address.strip()
    if not ip:
        return None
    match = _IPV4_RE.match(ip)
    if match:
        return f"{match.group(1)}.{match.group(2)}.*.*"
    if _IPV6_RE.match(ip):
        groups = ip.split(":")
        return f"{groups[0]}:{groups[1]}:*"
    return MASKED_PLACEHOLDER
