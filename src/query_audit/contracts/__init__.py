"""JSON schema contracts for query-audit artifacts."""
