"""
Recipient list parsing.

``recipients`` arrives as one string. Entries are separated by ``,`` or
``;``, may carry a display name (``Jane <jane@example.com>``), and are
reduced to bare addresses for the SMTP envelope. Quoted display names
containing a separator are not supported.
"""

import re
from email.utils import parseaddr

from mailrelay.shared.exceptions import InvalidRequestError

_SEPARATORS = re.compile(r"[,;]")


def _is_plausible_address(addr: str) -> bool:
    if not addr or any(ch.isspace() for ch in addr):
        return False
    local, sep, domain = addr.rpartition("@")
    return bool(sep) and bool(local) and bool(domain) and "@" not in local


def parse_recipients(raw: str, max_recipients: int = 50) -> list[str]:
    """Split a recipients string into bare addresses.

    Duplicates are dropped while keeping first-seen order.

    Raises:
        InvalidRequestError: If no address remains, an entry cannot be
            parsed, or the list exceeds ``max_recipients``.
    """
    entries = [entry.strip() for entry in _SEPARATORS.split(raw or "")]
    entries = [entry for entry in entries if entry]
    if not entries:
        raise InvalidRequestError("Recipients and email body are required.")

    addresses: list[str] = []
    seen: set[str] = set()
    for entry in entries:
        _, addr = parseaddr(entry)
        if not _is_plausible_address(addr):
            raise InvalidRequestError(f"Invalid recipient address: {entry}")
        key = addr.lower()
        if key in seen:
            continue
        seen.add(key)
        addresses.append(addr)

    if len(addresses) > max_recipients:
        raise InvalidRequestError(f"Too many recipients (maximum is {max_recipients}).")

    return addresses
