from pathlib import Path

from loguru import logger
from pydantic import ValidationError
from tomlkit import loads as toml_loads

from lsp_echohint import config_models, run_utils


class ConfigurationError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def read_toml_config(def_file: Path) -> config_models.EchoHintTomlConfig:
    logger.trace(f"Read config in {def_file}")
    with open(def_file, "rb") as pyproject_file:
        project_def = toml_loads(pyproject_file.read()).value

    raw_config = project_def.get("tool", {}).get("echohint", None)
    if raw_config is None:
        logger.trace(f"No echohint config in {def_file}, use defaults")
        return config_models.EchoHintTomlConfig()

    try:
        return config_models.EchoHintTomlConfig(**raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid echohint config in {def_file}: {error}") from error


def read_config(def_file: Path | None) -> config_models.EchoHintConfig:
    if def_file is None:
        return config_models.EchoHintConfig()

    toml_config = read_toml_config(def_file)
    display = None
    if toml_config.display is not None:
        try:
            display = run_utils.import_module_member_by_source_str(toml_config.display)
        except ModuleNotFoundError as error:
            raise ConfigurationError(
                f"Display function '{toml_config.display}' not found: {error}"
            ) from error
        if not callable(display):
            raise ConfigurationError(f"Display '{toml_config.display}' is not callable")

    return config_models.EchoHintConfig(
        auto_enable=toml_config.auto_enable,
        display=display,
        notify_errors=toml_config.notify_errors,
        log_level=toml_config.log_level,
    )


__all__ = ["ConfigurationError", "read_config", "read_toml_config"]
