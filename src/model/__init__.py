"""Model classes for distrobox-secure."""

from model.permission import (
    InvalidContainerName,
    InvalidPermissionKind,
    InvalidPermissionValue,
    PermissionRecord,
    PermissionStoreError,
    PermKind,
    parse_kind,
    validate_container_name,
)
from model.isolation import NAMESPACES, UNSHARE_FLAGS, IsolationState
from model.flags import CompiledFlags, PermissionFlag

__all__ = [
    "InvalidContainerName",
    "InvalidPermissionKind",
    "InvalidPermissionValue",
    "PermissionRecord",
    "PermissionStoreError",
    "PermKind",
    "parse_kind",
    "validate_container_name",
    "NAMESPACES",
    "UNSHARE_FLAGS",
    "IsolationState",
    "CompiledFlags",
    "PermissionFlag",
]
