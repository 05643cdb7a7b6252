"""
Standard span attributes for entityhydrator.

Attribute constants used across components for consistent span labelling.

Example:
    >>> with tracer.span(
    ...     "entityhydrator.hydrate",
    ...     {ATTR_ENTITY_TYPE: "Product", ATTR_ENTITY_ID: "1"},
    ... ):
    ...     pass
"""

# =============================================================================
# Entity Attributes
# =============================================================================

ATTR_ENTITY_TYPE = "entityhydrator.entity.type"
"""Type name of the root entity (e.g., 'Product', 'Order')."""

ATTR_ENTITY_ID = "entityhydrator.entity.id"
"""Primary key of the root entity (string)."""

ATTR_BATCH_SIZE = "entityhydrator.batch.size"
"""Number of root entities hydrated together (integer)."""

# =============================================================================
# Request Attributes
# =============================================================================

ATTR_RELATION_COUNT = "entityhydrator.relation.count"
"""Number of relation paths requested (integer)."""

ATTR_FETCH_PATH_COUNT = "entityhydrator.fetch.path_count"
"""Number of relation paths passed to the data-access layer (integer)."""

ATTR_APPLY_PRICES = "entityhydrator.apply_prices"
"""Whether variant prices are recomputed (boolean)."""

ATTR_LANGUAGE_CODE = "entityhydrator.language_code"
"""Language code translations are resolved to (string)."""

# =============================================================================
# Error Attributes
# =============================================================================

ATTR_ERROR_TYPE = "error.type"
"""Exception class name when an operation fails (string)."""
