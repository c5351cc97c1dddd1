from .read_configs import ConfigurationError, read_config, read_toml_config

__all__ = ["ConfigurationError", "read_config", "read_toml_config"]
