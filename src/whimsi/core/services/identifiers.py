from __future__ import annotations

"""
Identifier Generation and Validation.

Synthesizes process-unique identifiers that satisfy the package database's
Identifier column rules: at most 72 characters, starting with a letter or
an underscore, and containing only ASCII letters, digits, underscores and
periods.
"""

import re
import uuid

from whimsi.domain.constants import MAX_IDENTIFIER_LENGTH
from whimsi.domain.errors import TableConstraintError

_IDENTIFIER_RX = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")

# Namespace for deriving component GUIDs from component identifiers
_COMPONENT_NAMESPACE = uuid.UUID("8d1c7f3e-4a0b-5c2e-9f61-2b7d0e4a6c13")


# -----------------------------------------------------------------------------
# GENERATION API
# -----------------------------------------------------------------------------

def fresh_identifier() -> str:
    """
    Return a new random identifier.

    The value is a version 4 UUID (drawn from the OS CSPRNG) in canonical
    form with hyphens turned into underscores and a leading underscore, so
    it never starts with a digit.

    Returns:
        str: A 37 character identifier.
    """
    return "_" + str(uuid.uuid4()).replace("-", "_").upper()


def component_guid(component_id: str) -> str:
    """
    Derive the registry GUID of a component from its identifier.

    Args:
        component_id: The component's table key.

    Returns:
        str: Brace-wrapped uppercase GUID, stable for a given identifier.
    """
    return "{" + str(uuid.uuid5(_COMPONENT_NAMESPACE, component_id)).upper() + "}"


# -----------------------------------------------------------------------------
# VALIDATION API
# -----------------------------------------------------------------------------

def is_legal_identifier(value: str) -> bool:
    """Check length and charset of an identifier."""
    if not value or len(value) > MAX_IDENTIFIER_LENGTH:
        return False
    return _IDENTIFIER_RX.match(value) is not None


def ensure_legal_identifier(value: str, table: str, column: str) -> str:
    """
    Validate an identifier destined for a table column.

    Args:
        value: Candidate identifier.
        table: Table name used in the error report.
        column: Column name used in the error report.

    Returns:
        str: The unchanged value.

    Raises:
        TableConstraintError: If the identifier is too long or uses illegal characters.
    """
    if len(value) > MAX_IDENTIFIER_LENGTH:
        raise TableConstraintError(
            table, column, value, f"exceeds {MAX_IDENTIFIER_LENGTH} characters"
        )
    if not is_legal_identifier(value):
        raise TableConstraintError(table, column, value, "is not a legal identifier")
    return value
