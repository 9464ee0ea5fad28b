"""Configuration: constants, models and the TOML-backed manager."""
