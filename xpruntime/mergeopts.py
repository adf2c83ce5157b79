"""Options that control how a value is merged into an existing one."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["MergeFlag", "MergeOptions", "merge_flags_for"]


class MergeFlag(enum.Enum):
    """A merge behaviour."""

    OVERRIDE = "override"
    APPEND_SLICE = "append_slice"


@dataclass
class MergeOptions:
    """Merge options on a field path. Unset options are None."""

    keep_map_values: bool | None = None
    append_slice: bool | None = None

    def merge_flags(self) -> list[MergeFlag]:
        """Return the merge behaviours; by default maps and lists are replaced."""
        flags = [MergeFlag.OVERRIDE]
        if self.keep_map_values:
            flags = []
        if self.append_slice:
            flags.append(MergeFlag.APPEND_SLICE)
        return flags

    def is_append_slice(self) -> bool:
        """Return True if append_slice is set to True."""
        return bool(self.append_slice)


def merge_flags_for(options: MergeOptions | None) -> list[MergeFlag]:
    """Return the merge behaviours for options, which may be None."""
    if options is None:
        return [MergeFlag.OVERRIDE]
    return options.merge_flags()