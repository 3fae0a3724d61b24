"""CLI command modules; each exposes a ``register_*`` function."""
