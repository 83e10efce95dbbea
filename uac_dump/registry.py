"""
Registry of descriptor tables by kind and revision.

Every (kind, revision) pair is present; ``None`` marks a descriptor the
revision does not define, or one not implemented yet (all of UAC 3.0).
"""

from types import MappingProxyType
from typing import Mapping, Optional, Union

from .descriptors import ALL_TABLES
from .model import DescriptorKind, DescriptorTable, Revision


def _build_registry() -> Mapping[tuple[DescriptorKind, Revision], Optional[DescriptorTable]]:
    """Index the known tables, leaving every other slot empty."""
    registry: dict[tuple[DescriptorKind, Revision], Optional[DescriptorTable]] = {
        (kind, revision): None for kind in DescriptorKind for revision in Revision
    }
    for table in ALL_TABLES:
        key = (table.kind, table.revision)
        if registry[key] is not None:
            raise ValueError(f"duplicate descriptor table for {table.name}")
        registry[key] = table
    return MappingProxyType(registry)


REGISTRY = _build_registry()


def lookup(kind: DescriptorKind, revision: Union[Revision, int]) -> Optional[DescriptorTable]:
    """
    Find the table describing a descriptor kind for a revision.

    Args:
        kind: The descriptor kind
        revision: UAC revision, as a Revision or a plain integer

    Returns:
        The descriptor table, or None if the pair is unsupported
    """
    try:
        revision = Revision(revision)
    except ValueError:
        return None
    return REGISTRY.get((kind, revision))


def supported_kinds(revision: Union[Revision, int]) -> list[DescriptorKind]:
    """Get the descriptor kinds that have a table for a revision."""
    return [kind for kind in DescriptorKind if lookup(kind, revision) is not None]
