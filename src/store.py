"""Permission store: the line-oriented permissions file.

Each non-comment line is `container:kind:value`. Grants append, revokes
rewrite the file without the matching lines. There is no locking; callers
that run concurrently against the same file must serialize themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path

from constants import CONFIG_HEADER, get_config_path
from fileutils import append_line, replace_file_atomic, write_file_atomic
from model.permission import (
    InvalidPermissionValue,
    PermissionRecord,
    PermissionStoreError,
    PermKind,
    parse_kind,
    validate_container_name,
)

log = logging.getLogger(__name__)


class PermissionStore:
    """Append-only record set keyed by container name."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else get_config_path()

    def ensure_exists(self) -> bool:
        """Create the config directory and a commented config file.

        Returns True if the file was created.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            write_file_atomic(self.path, CONFIG_HEADER, 0o644)
        except FileExistsError:
            return False
        log.info(f"Created permissions file {self.path}")
        return True

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        # Split on "\n" only; str.splitlines also breaks on \x0b, \x85 and \u2028
        with self.path.open(newline="\n") as f:
            return list(f)

    def records(self) -> list[PermissionRecord]:
        """Every parseable record in file order.

        Lines that don't parse are skipped with a warning; they stay in the
        file untouched.
        """
        result = []
        for lineno, line in enumerate(self._read_lines(), start=1):
            try:
                record = PermissionRecord.from_line(line)
            except (ValueError, PermissionStoreError) as e:
                log.warning(f"{self.path}:{lineno}: skipping unparseable line: {e}")
                continue
            if record is not None:
                result.append(record)
        return result

    def list(self, container: str) -> list[PermissionRecord]:
        """All records for container in storage order.

        An empty list is the default: maximum isolation, no grants.
        """
        return [r for r in self.records() if r.container == container]

    def containers(self) -> list[str]:
        """Container names with at least one record, in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.records():
            seen.setdefault(record.container, None)
        return list(seen)

    def grant(self, container: str, kind: str | PermKind, value: str) -> PermissionRecord:
        """Append a record. Duplicates are kept; nothing is merged.

        Raises:
            InvalidPermissionKind: kind is not a PermKind
            InvalidContainerName: container can't be used as a key
            InvalidPermissionValue: value contains a line break
        """
        perm_kind = parse_kind(kind)
        validate_container_name(container)
        if value.splitlines() not in ([], [value]):
            raise InvalidPermissionValue(f"Permission value cannot contain line breaks: {value!r}")

        record = PermissionRecord(container=container, kind=perm_kind, value=value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        append_line(self.path, record.to_line())
        log.debug(f"Granted {record.to_line()}")
        return record

    def revoke(self, container: str, kind: str | PermKind) -> int:
        """Remove every record matching (container, kind).

        Returns the number of records removed; zero is not an error. All
        other lines, comments included, are written back unchanged.
        """
        perm_kind = parse_kind(kind)
        lines = self._read_lines()
        kept = []
        removed = 0
        for line in lines:
            try:
                record = PermissionRecord.from_line(line)
            except (ValueError, PermissionStoreError):
                record = None
            if record is not None and record.container == container and record.kind is perm_kind:
                removed += 1
                continue
            kept.append(line)

        if removed:
            replace_file_atomic(self.path, "".join(kept))
            log.debug(f"Revoked {removed} {perm_kind.value} record(s) from {container}")
        return removed
