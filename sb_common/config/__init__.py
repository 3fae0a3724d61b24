"""Configuration helpers shared across statebench packages."""

from sb_common.config.env import LogEnv, parse_bool_env

__all__ = ["LogEnv", "parse_bool_env"]
