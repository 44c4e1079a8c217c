"""Cross-cutting SDK infrastructure: errors, schemas and logging."""
