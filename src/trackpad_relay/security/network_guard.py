from __future__ import annotations

# Coarse trust boundary: only private, loopback and link-local peers may connect.
# Prefix matching on the textual address, as clients report it.

_IPV6_LOCAL_PREFIXES = ("fe80:", "fc", "fd")


def _is_private_ipv4(ip: str) -> bool:
    parts = ip.split(".")
    if len(parts) != 4 or not all(p.isdigit() and len(p) <= 3 for p in parts):
        return False
    octets = [int(p) for p in parts]
    if any(o > 255 for o in octets):
        return False
    a, b = octets[0], octets[1]
    if a == 10:
        return True
    if a == 192 and b == 168:
        return True
    if a == 172 and 16 <= b <= 31:
        return True
    return ip == "127.0.0.1"


def is_local(ip: str | None) -> bool:
    """True if `ip` is in a private/loopback/link-local range. Malformed input is never local."""
    if not isinstance(ip, str) or not ip:
        return False
    ip = ip.strip().lower()
    if ":" not in ip:
        return _is_private_ipv4(ip)
    if ip == "::1":
        return True
    if ip.startswith("::ffff:") and "." in ip:
        # IPv4-mapped address from a dual-stack listener
        return _is_private_ipv4(ip[len("::ffff:"):])
    return ip.startswith(_IPV6_LOCAL_PREFIXES)
