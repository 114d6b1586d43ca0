from __future__ import annotations

from typing import List, Sequence

from .errors import PathError
from .models import MAX_SITE_COUNT_DIGITS, Site, SiteType

SITE_COUNT_DELIMITER = ";"
SITE_TOKEN_LENGTH = 3
SITE_NAME_LENGTH = 2
UNLIMITED_CAPACITY = "-"
PATH_ALPHABET = set("123456789:-MoDVRi")

_SITE_TYPES = {site_type.value: site_type for site_type in SiteType}


def parse_site_count(text: str) -> int:
    prefix, sep, _ = text.partition(SITE_COUNT_DELIMITER)
    if not sep:
        raise PathError("missing site count delimiter")
    if not prefix or not prefix.isdigit() or not prefix.isascii():
        raise PathError("site count must be a run of digits")
    if len(prefix) > MAX_SITE_COUNT_DIGITS:
        raise PathError("site count is too long")
    return int(prefix)


def parse_site(token: str, index: int, player_count: int) -> Site:
    name, capacity_char = token[:SITE_NAME_LENGTH], token[SITE_NAME_LENGTH:]
    site_type = _SITE_TYPES.get(name)
    if site_type is None:
        raise PathError(f"unknown site type {name!r} at site {index}")

    if capacity_char == UNLIMITED_CAPACITY:
        capacity = player_count
    elif site_type == SiteType.BARRIER:
        raise PathError(f"barrier at site {index} must have unlimited capacity")
    elif capacity_char in "123456789" and len(capacity_char) == 1:
        capacity = int(capacity_char)
    else:
        raise PathError(f"bad capacity {capacity_char!r} at site {index}")

    return Site(raw_name=token, name=name, site_type=site_type, index=index, capacity=capacity)


def parse_path(text: str, player_count: int) -> List[Site]:
    """Parse ``<N>;`` followed by N three-character site tokens."""
    raw = text[:-1] if text.endswith("\n") else text
    count = parse_site_count(raw)
    body = raw.partition(SITE_COUNT_DELIMITER)[2]

    if any(ch not in PATH_ALPHABET for ch in body):
        raise PathError("path contains unexpected characters")
    if len(body) != count * SITE_TOKEN_LENGTH:
        raise PathError(f"expected {count} sites")
    if count < 2:
        raise PathError("path needs at least two sites")

    sites = [
        parse_site(body[idx : idx + SITE_TOKEN_LENGTH], idx // SITE_TOKEN_LENGTH, player_count)
        for idx in range(0, len(body), SITE_TOKEN_LENGTH)
    ]
    if not sites[0].is_barrier or not sites[-1].is_barrier:
        raise PathError("path must start and end with a barrier")
    return sites


def path_text(sites: Sequence[Site]) -> str:
    return f"{len(sites)}{SITE_COUNT_DELIMITER}" + "".join(site.raw_name for site in sites)
