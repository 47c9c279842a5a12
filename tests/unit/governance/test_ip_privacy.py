"""IP masking: IPv4 keeps two octets, IPv6 keeps two groups, anything else is a placeholder."""

import pytest

from app.governance.ip_privacy import MASKED_PLACEHOLDER, mask_ip


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("192.168.1.42", "192.168.*.*"),
        ("203.0.113.7", "203.0.*.*"),
        ("2001:db8:85a3::8a2e:370:7334", "2001:db8:*"),
        ("fe80:0:0:0:1:2:3:4", "fe80:0:*"),
        ("not-an-ip", MASKED_PLACEHOLDER),
        ("10.0.0", MASKED_PLACEHOLDER),
        ("255.255.0.1", "255.255.*.*"),
        ("999.1.2.3", MASKED_PLACEHOLDER),
        ("1.2.3.256", MASKED_PLACEHOLDER),
        ("01.2.3.4", MASKED_PLACEHOLDER),
    ],
)
def test_mask_ip(raw, expected):
    assert mask_ip(raw) == expected


def test_absent_ip_stays_absent():
    assert mask_ip(None) is None
    assert mask_ip("") is None
    assert mask_ip("   ") is None


def test_mask_never_leaks_last_octets():
    masked = mask_ip("172.16.254.99")
    assert "254" not in masked
    assert "99" not in masked
