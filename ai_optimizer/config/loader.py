"""
AI Optimizer — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Routing tables are not read from the environment; hosts that need different
tables construct an OptimizerConfig directly and pass it in.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import OptimizerConfig

logger = logging.getLogger(__name__)

_config_instance: OptimizerConfig | None = None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> OptimizerConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated OptimizerConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "single_flight": _env_flag("OPTIMIZER_SINGLE_FLIGHT", "false"),
            "cache": {
                "enabled": _env_flag("OPTIMIZER_CACHE_ENABLED", "true"),
                "namespace": os.getenv("OPTIMIZER_CACHE_NAMESPACE", "ai"),
                "max_size": int(os.getenv("OPTIMIZER_CACHE_MAX_SIZE", "10000")),
                "ttl_medium_seconds": int(os.getenv("OPTIMIZER_CACHE_TTL_SECONDS", "3600")),
                "compression_threshold": int(os.getenv("OPTIMIZER_COMPRESSION_THRESHOLD", "1024")),
                "version": os.getenv("OPTIMIZER_CACHE_VERSION", "1"),
            },
            "compression": {
                "enabled": _env_flag("OPTIMIZER_COMPRESSION_ENABLED", "true"),
                "max_context_length": int(os.getenv("OPTIMIZER_MAX_CONTEXT_LENGTH", "4000")),
            },
            "audit": {
                "enabled": _env_flag("AUDIT_ENABLED", "false"),
                "db_path": os.getenv("AUDIT_DB_PATH", "./data/optimization.db"),
            },
        }
    except ValueError as e:
        logger.error(f"Invalid numeric configuration value: {e}", extra={"error": str(e)})
        raise ConfigurationError(
            f"Invalid numeric configuration value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = OptimizerConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment.value})",
            extra={
                "environment": _config_instance.environment.value,
                "cache_max_size": _config_instance.cache.max_size,
            },
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> OptimizerConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current OptimizerConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> OptimizerConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded OptimizerConfig instance
    """
    return load_config(env_file=env_file, reload=True)
