"""Request context parsing: user-agent to device facts, headers to client IP. Pure functions, no I/O."""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from app.governance.audit_models import DeviceInfo

UNKNOWN_USER_AGENT = "Unknown"
UNKNOWN_DEVICE = "Unknown Device"
UNKNOWN_OS = "Unknown OS"
UNKNOWN_BROWSER = "Unknown Browser"

# Client IP headers in priority order; X-Forwarded-For contributes its first entry only.
FORWARDED_FOR_HEADER = "x-forwarded-for"
CLIENT_IP_HEADERS = ("cf-connecting-ip", "true-client-ip", "x-real-ip")
USER_AGENT_HEADER = "user-agent"

_MOBILE_RE = re.compile(r"mobile|android|iphone|ipad|ipod|blackberry|iemobile|opera mini", re.IGNORECASE)
_IPHONE_OS_RE = re.compile(r"iphone os (\d+)_(\d+)")
_IPAD_OS_RE = re.compile(r"cpu os (\d+)_(\d+)")
_ANDROID_RE = re.compile(r"android (\d+)\.?(\d+)?")
_MAC_OS_RE = re.compile(r"mac os x (\d+)[_.](\d+)")

_WINDOWS_NT_VERSIONS = (
    ("windows nt 10.0", "Windows 10/11"),
    ("windows nt 6.3", "Windows 8.1"),
    ("windows nt 6.2", "Windows 8"),
    ("windows nt 6.1", "Windows 7"),
)


@dataclass(frozen=True)
class RequestContext:
    """Everything the writer captures about where a request came from."""

    user_agent: str
    ip_address: Optional[str]
    device: DeviceInfo


def _device_and_os(ua: str) -> tuple[str, str]:
    if "iphone" in ua:
        match = _IPHONE_OS_RE.search(ua)
        return "iPhone", f"iOS {match.group(1)}.{match.group(2)}" if match else "iOS"
    if "ipad" in ua:
        match = _IPAD_OS_RE.search(ua)
        return "iPad", f"iOS {match.group(1)}.{match.group(2)}" if match else "iPadOS"
    if "android" in ua:
        match = _ANDROID_RE.search(ua)
        if not match:
            return "Android Device", "Android"
        minor = f".{match.group(2)}" if match.group(2) else ""
        return "Android Device", f"Android {match.group(1)}{minor}"
    if "windows phone" in ua:
        return "Windows Phone", "Windows Phone"
    if "windows" in ua:
        for marker, name in _WINDOWS_NT_VERSIONS:
            if marker in ua:
                return "Windows PC", name
        return "Windows PC", "Windows"
    if "mac os x" in ua:
        match = _MAC_OS_RE.search(ua)
        return "Mac", f"macOS {match.group(1)}.{match.group(2)}" if match else "macOS"
    if "linux" in ua:
        return "Linux PC", "Linux"
    return UNKNOWN_DEVICE, UNKNOWN_OS


def _browser(ua: str) -> str:
    if "edg/" in ua or "edge/" in ua:
        return "Edge"
    if "chrome/" in ua:
        return "Chrome"
    if "safari/" in ua:
        return "Safari"
    if "firefox/" in ua:
        return "Firefox"
    if "opera/" in ua or "opr/" in ua:
        return "Opera"
    if "msie" in ua or "trident/" in ua:
        return "Internet Explorer"
    return UNKNOWN_BROWSER


def parse_user_agent(user_agent: Optional[str]) -> DeviceInfo:
    """
    Derive device/OS/browser names from a raw user-agent string.
    is_mobile is tested independently of the device branch, so a desktop signature
    carrying a mobile marker is still flagged mobile.
    """
    ua = (user_agent or UNKNOWN_USER_AGENT).lower()
    device_name, os_name = _device_and_os(ua)
    return DeviceInfo(
        device_name=device_name,
        os_name=os_name,
        browser_name=_browser(ua),
        is_mobile=bool(_MOBILE_RE.search(ua)),
    )


def _lower_keys(headers: Mapping[str, str]) -> dict[str, str]:
    # First occurrence wins; a repeated header must not replace the earliest value.
    lowered: dict[str, str] = {}
    for key, value in headers.items():
        lowered.setdefault(key.lower(), value)
    return lowered


def resolve_client_ip(headers: Mapping[str, str]) -> Optional[str]:
    """First match wins: forwarded-for first entry, CDN header, true-client-ip, real-ip."""
    lowered = _lower_keys(headers)
    forwarded = lowered.get(FORWARDED_FOR_HEADER)
    if forwarded and forwarded.strip():
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    for name in CLIENT_IP_HEADERS:
        value = lowered.get(name)
        if value and value.strip():
            return value.strip()
    return None


def parse_request_context(headers: Mapping[str, str]) -> RequestContext:
    lowered = _lower_keys(headers)
    user_agent = lowered.get(USER_AGENT_HEADER) or UNKNOWN_USER_AGENT
    return RequestContext(
        user_agent=user_agent,
        ip_address=resolve_client_ip(lowered),
        device=parse_user_agent(user_agent),
    )
