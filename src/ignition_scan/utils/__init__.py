"""Support utilities: file watching and logging setup."""
