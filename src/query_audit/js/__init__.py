"""JavaScript / TypeScript syntax layer: parsing, node shapes and scopes."""
