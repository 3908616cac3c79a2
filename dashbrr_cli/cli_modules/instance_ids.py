"""Instance id allocation for service records.

Ids look like "<type>-<n>" with n a positive integer. The next
id is derived from the records that exist right now: max n for
the prefix, plus one. Gaps left by removed records are never
filled and a live id is never handed out twice.

There is no stored counter and no lock. Two adds of the same
type that both read the records before either writes get the
same id. Single-operator CLI use only.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dashbrr_cli.cli_modules.types import ServiceRecord


def parse_instance_number(instance_id: str, prefix: str) -> int | None:
    """Return n for '<prefix><n>', or None if the suffix is malformed."""
    if not instance_id.startswith(prefix):
        return None
    suffix = instance_id[len(prefix):]
    if not suffix.isascii() or not suffix.isdigit():
        return None
    number = int(suffix)
    return number if number > 0 else None


def next_instance_id(
    records: Iterable[ServiceRecord],
    prefix: str,
) -> str:
    """Allocate the next instance id for prefix (e.g. 'radarr-')."""
    max_num = 0
    for record in records:
        number = parse_instance_number(record.instance_id, prefix)
        if number is not None and number > max_num:
            max_num = number
    return f"{prefix}{max_num + 1}"
