"""Output rendering: tables, JSON, YAML and CSV."""
