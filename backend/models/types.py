"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
different ID types (e.g., passing an AuditRecordID where an IdentityID is expected).

Uses TypeAlias for complex types that are purely structural.
"""

from typing import Any, NewType, TypeAlias

# ID types using NewType for type safety
IdentityID = NewType("IdentityID", str)
AuditRecordID = NewType("AuditRecordID", str)
ProviderMessageID = NewType("ProviderMessageID", str)

# Structural aliases using TypeAlias
EmailAddress: TypeAlias = str
TemplateData: TypeAlias = dict[str, Any]
