"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize transport schema version constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.

Identity commitment versions (which leaf encoding a root was built with)
are owned by core.dip.leaf_codec, not by the transport schema.
"""

from typing import Literal

# Current schema version of proof and result documents
SCHEMA_VERSION: str = "v1"

# Enforced by pydantic on every document carrying a schema_version field
SchemaVersion = Literal["v1"]

# Advertised by GET /capabilities
SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})
