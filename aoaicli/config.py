"""Configuration management for aoaicli with multi-source loading."""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
from pydantic import BaseModel, Field, field_validator

from .logger import get_logger

logger = get_logger(__name__)

# Variable names understood for compatibility with existing .env files.
ENDPOINT_ENV_VAR = "AZUREOPENAIENDPOINT"
API_KEY_ENV_VAR = "AZUREOPENAIAPI"
MODELS_ENV_VAR = "AZUREOPENAIMODEL"
SYSTEM_PROMPT_ENV_VAR = "SYSTEMPROMPT"

ENV_PREFIX = "AOAICLI_"
CONFIG_DIR_ENV_VAR = "AOAICLI_CONFIG_DIR"


def parse_model_list(value: Any) -> List[str]:
    """Normalize a comma-separated string or list of model names."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    models: List[str] = []
    for model in value:
        model = str(model).strip()
        if model and model not in models:
            models.append(model)
    return models


def clean_setting(value: Any) -> Any:
    """Strip string settings and treat empty strings as unset."""
    if isinstance(value, str):
        return value.strip() or None
    return value


class LogLevel(str, Enum):
    """Available logging levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CliConfig(BaseModel):
    """Main configuration class with validation and multi-source loading."""

    # Azure OpenAI connection
    azure_endpoint: Optional[str] = Field(
        default=None, description="Azure OpenAI resource endpoint"
    )
    azure_api_key: Optional[str] = Field(default=None, description="Azure OpenAI API key")
    api_version: str = Field(default="2024-10-21", description="Azure OpenAI API version")

    # Model selection
    active_model: Optional[str] = Field(
        default=None, description="Deployment used for completions"
    )
    available_models: List[str] = Field(
        default_factory=list, description="Deployments that can be selected"
    )

    # Request parameters
    max_output_tokens: int = Field(
        default=10000, description="Maximum completion tokens per reply"
    )
    temperature: float = Field(default=0.55, description="Sampling temperature")
    top_p: float = Field(default=1.0, description="Nucleus sampling probability")
    frequency_penalty: float = Field(default=0.0, description="Frequency penalty")
    presence_penalty: float = Field(default=0.0, description="Presence penalty")

    # Session
    system_prompt: Optional[str] = Field(
        default=None, description="System prompt for new sessions"
    )
    max_turns: int = Field(default=100, description="Turn limit for a session")
    history_turns: int = Field(
        default=10, description="Turns of history sent with each prompt"
    )

    # Output
    rich_output: bool = Field(default=True, description="Enable rich text formatting")
    show_debug: bool = Field(default=False, description="Show debug information")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")

    @field_validator("available_models", mode="before")
    @classmethod
    def split_model_list(cls, v):
        """Accept a comma-separated string as well as a list."""
        return parse_model_list(v)

    @field_validator("azure_endpoint", "azure_api_key", "active_model", mode="before")
    @classmethod
    def strip_values(cls, v):
        return clean_setting(v)

    def initialize_models(self, models_value: Optional[str]) -> None:
        """Populate available models from a comma-separated list.

        The first model becomes active when no active model is set or the
        current one is not in the list.
        """
        if not models_value:
            return

        models = parse_model_list(models_value)
        if not models:
            return

        self.available_models = models
        if not self.active_model or self.active_model not in models:
            self.active_model = models[0]

    def set_active_model(self, model_name: str) -> bool:
        """Select a model from the available list (case-insensitive)."""
        wanted = model_name.strip().lower()
        for model in self.available_models:
            if model.lower() == wanted:
                self.active_model = model
                return True
        return False

    def validate_current_setup(self) -> bool:
        """Check that endpoint, key and model are all configured."""
        return not get_missing_settings(self)


def get_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".aoaicli"


def get_config_paths() -> List[Path]:
    """Get configuration file paths in priority order."""
    paths = [get_config_dir() / "config.toml"]

    if os.name == "posix":
        paths.append(Path("/etc/aoaicli/config.toml"))
    elif os.name == "nt":
        paths.append(
            Path(os.environ.get("ProgramData", "C:/ProgramData"))
            / "aoaicli"
            / "config.toml"
        )

    return paths


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Load configuration from a TOML file."""
    try:
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                return toml.load(f)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
    return {}


def load_environment_variables() -> Dict[str, Any]:
    """Load configuration from AOAICLI_* environment variables."""
    config = {}

    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX) and key != CONFIG_DIR_ENV_VAR:
            config_key = key[len(ENV_PREFIX) :].lower()

            # Handle boolean values
            if value.lower() in ("true", "yes", "on"):
                config[config_key] = True
            elif value.lower() in ("false", "no", "off"):
                config[config_key] = False
            else:
                # Numbers and strings are coerced by the model
                config[config_key] = value

    return config


def load_configuration(
    config_file: Optional[str] = None,
    debug: bool = False,
    model_override: Optional[str] = None,
    system_prompt: Optional[str] = None,
) -> CliConfig:
    """Load configuration from multiple sources with priority handling.

    Priority order (highest to lowest):
    1. Function parameters (debug, model_override, system_prompt)
    2. Environment variables (AOAICLI_*)
    3. Custom config file (config_file)
    4. User config file (~/.aoaicli/config.toml)
    5. System config file (/etc/aoaicli/config.toml)
    6. Default values

    The Azure variables AZUREOPENAIENDPOINT, AZUREOPENAIAPI, AZUREOPENAIMODEL
    and SYSTEMPROMPT fill in whatever is still unset afterwards.
    """
    primary_config_path = get_config_dir() / "config.toml"

    merged_config: Dict[str, Any] = {}
    config_loaded_from_file = False

    config_paths = get_config_paths()
    if config_file:
        config_paths.insert(0, Path(config_file))

    for path in reversed(config_paths):  # Reverse to maintain priority
        file_config = load_config_file(path)
        if file_config:
            merged_config.update(file_config)
            config_loaded_from_file = True

    merged_config.update(load_environment_variables())

    if debug:
        merged_config["show_debug"] = True
        merged_config["log_level"] = LogLevel.DEBUG

    if system_prompt is not None:
        merged_config["system_prompt"] = system_prompt

    try:
        config = CliConfig(**merged_config)
    except ValueError as e:
        logger.warning("Invalid configuration, using defaults: %s", e)
        config = CliConfig()
        if debug:
            config.show_debug = True
            config.log_level = LogLevel.DEBUG

    # The default file holds defaults only; environment and command-line
    # values are re-read on every run.
    if not config_loaded_from_file and not primary_config_path.exists():
        save_config(CliConfig(), primary_config_path)

    if not config.azure_endpoint:
        config.azure_endpoint = clean_setting(os.environ.get(ENDPOINT_ENV_VAR))

    if not config.azure_api_key:
        config.azure_api_key = clean_setting(os.environ.get(API_KEY_ENV_VAR))

    if config.system_prompt is None:
        config.system_prompt = os.environ.get(SYSTEM_PROMPT_ENV_VAR) or None

    config.initialize_models(os.environ.get(MODELS_ENV_VAR))

    if model_override:
        if config.available_models:
            if not config.set_active_model(model_override):
                raise ConfigurationError(
                    f"Unknown model '{model_override}'. "
                    f"Available models: {', '.join(config.available_models)}"
                )
        else:
            config.active_model = model_override.strip()

    return config


def save_config(config: CliConfig, config_path: Optional[Path] = None) -> bool:
    """Save configuration to file. The API key is never written."""
    if config_path is None:
        config_path = get_config_dir() / "config.toml"

    config_dict = config.model_dump(
        mode="json", exclude_none=True, exclude={"azure_api_key"}
    )
    return _write_config_file(config_dict, config_path)


def save_active_model(model_name: str, config_path: Optional[Path] = None) -> bool:
    """Persist the active model, keeping every other setting in the file."""
    if config_path is None:
        config_path = get_config_dir() / "config.toml"

    file_config = load_config_file(config_path)
    if not file_config and config_path.exists() and config_path.stat().st_size:
        logger.warning("Not saving the active model over unreadable %s", config_path)
        return False

    file_config["active_model"] = model_name
    return _write_config_file(file_config, config_path)


def _write_config_file(data: Dict[str, Any], config_path: Path) -> bool:
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(data, f)

        return True

    except OSError as e:
        logger.warning("Could not save config to %s: %s", config_path, e)
        return False


class ConfigurationError(Exception):
    """Configuration-related errors."""

    pass


def get_missing_settings(config: CliConfig) -> List[str]:
    """List the required settings that are not configured."""
    missing = []
    if not config.azure_endpoint:
        missing.append(f"endpoint ({ENDPOINT_ENV_VAR})")
    if not config.azure_api_key:
        missing.append(f"API key ({API_KEY_ENV_VAR})")
    if not config.active_model:
        missing.append(f"model ({MODELS_ENV_VAR})")
    return missing


def validate_api_setup(config: CliConfig) -> None:
    """Validate that the Azure OpenAI setup is complete."""
    missing = get_missing_settings(config)
    if missing:
        raise ConfigurationError(
            f"Azure OpenAI {', '.join(missing)} not set. "
            "Set the environment variables, add them to .env, or add them to "
            "the config file."
        )
