"""Cross-cutting infrastructure: logging, security, access rules, events."""
