"""Host name and IP address validation."""

import ipaddress
import re

_LABEL = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")


class HostValidator:
    """Validate that a host is a legal hostname or IP literal"""

    @staticmethod
    def is_ip_address(host: str) -> bool:
        """Check for an IPv4 or IPv6 literal (brackets allowed around IPv6)"""
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]

        try:
            ipaddress.ip_address(host)
        except ValueError:
            return False

        return True

    @staticmethod
    def is_hostname(host: str) -> bool:
        """Check RFC 1123 hostname syntax; one trailing dot is allowed"""
        if host.endswith("."):
            host = host[:-1]

        if not host or len(host) > 253:
            return False

        return all(_LABEL.fullmatch(label) for label in host.split("."))

    @staticmethod
    def is_valid_host(host: str) -> bool:
        if not host or not isinstance(host, str):
            return False

        return HostValidator.is_ip_address(host) or HostValidator.is_hostname(host)
