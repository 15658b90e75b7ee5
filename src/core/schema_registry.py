"""Schema descriptors for bulk-editable lookup tables.

Descriptors are hand-authored constants, one per configuration domain.
They are never derived from the store.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from core.errors import UnknownDomainError
from core.types import SchemaDescriptor

CCGROUPS_SCHEMA = SchemaDescriptor(
    domain="ccgroups",
    table_name="audience_ccgroups",
    field_names=("audiencetype", "code", "role", "forcesend", "description", "ccgroupid"),
    delimiter="|",
    minimum_field_count=6,
    case_normalize=True,
    single_line_fields=("description",),
)

MODERATOR_ASSISTANTS_SCHEMA = SchemaDescriptor(
    domain="moderator_assistants",
    table_name="moderator_assistants",
    field_names=("modusername", "assistantusername"),
    delimiter=",",
    minimum_field_count=2,
    case_normalize=True,
)

PRIVILEGES_SCHEMA = SchemaDescriptor(
    domain="privileges",
    table_name="privileges",
    field_names=(
        "audiencetype",
        "code",
        "role",
        "condition",
        "forcesend",
        "description",
        "checktype",
        "checkvalue",
        "checkorder",
        "modrequired",
        "modthreshold",
        "modusername",
        "modpriority",
        "active",
    ),
    delimiter=",",
    minimum_field_count=14,
    case_normalize=False,
    single_line_fields=("description",),
)

_REGISTRY: Mapping[str, SchemaDescriptor] = MappingProxyType(
    {
        schema.domain: schema
        for schema in (CCGROUPS_SCHEMA, MODERATOR_ASSISTANTS_SCHEMA, PRIVILEGES_SCHEMA)
    }
)


def describe(domain: str) -> SchemaDescriptor:
    """Look up the schema descriptor for a domain.

    Args:
        domain: Registered domain name.

    Returns:
        The domain's schema descriptor.

    Raises:
        UnknownDomainError: If no descriptor is registered for the domain.
    """
    schema = _REGISTRY.get(domain)
    if schema is None:
        raise UnknownDomainError(
            f"Unknown schema domain '{domain}'. "
            f"Use one of: {', '.join(registered_domains())}."
        )
    return schema


def registered_domains() -> tuple[str, ...]:
    """Return registered domain names in sorted order."""
    return tuple(sorted(_REGISTRY))
