"""Deterministic release names for instance ids."""

from __future__ import annotations

NAME_PREFIX = "helmi"
NAME_LENGTH = 14


def derive_name(instance_id: str, prefix: str = NAME_PREFIX) -> str:
    """Map an instance id to a release name.

    Ids that already carry the prefix are used unchanged. Anything else is
    lowercased, stripped of ``-`` and ``_`` and cut to 14 characters so the
    result stays within the deployment tool's name limits.

    Example:
        >>> derive_name("this_is-a_test_name_which-is_pretty-long")
        'helmithisisatestnam'
    """
    if instance_id.startswith(prefix):
        return instance_id

    name = instance_id.lower().replace("-", "").replace("_", "")
    return prefix + name[:NAME_LENGTH]
