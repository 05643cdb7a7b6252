"""Common type definitions for the entityhydrator library."""

# Primary keys are unique within an entity type
EntityId = int | str

# Dot-separated relation path, e.g. "lines.product_variant.stock_levels"
RelationPath = str

# Language codes as carried by translations ("en", "de")
LanguageCode = str
