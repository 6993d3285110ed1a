"""
Schemas
File: versioning.py

Purpose: Centralize wire schema version constants.
Kept free of imports from other schema files to avoid circular dependencies.
"""

from typing import Literal

# Current schema version for serialized proofs and summaries
SCHEMA_VERSION: str = "v1"

# Type alias for schema version (future-proof for migrations)
SchemaVersion = Literal["v1"]
