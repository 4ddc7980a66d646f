import os
import re
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from .logging import get_logger, setup_logging, StructuredLogger

logger = get_logger(__name__)


class AuthorityConfig(BaseModel):
    """Policy authority connection settings."""
    base_url: str = "http://localhost:8000/api"
    snapshot_path: str = "/rbac"
    timeout: Dict[str, float] = Field(
        default_factory=lambda: {
            "connect": 5.0,
            "read": 30.0,
            "write": 5.0,
            "pool": 5.0
        }
    )
    headers: Dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Logging settings."""
    level: str = "INFO"
    format: str = "text"
    file: Optional[str] = None


class ClientConfig(BaseModel):
    """Main RBAC client configuration."""
    authority: AuthorityConfig = Field(default_factory=AuthorityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    
    # Raw configuration for settings consumed by the hosting application
    raw_config: Dict[str, Any] = Field(default_factory=dict)


class ConfigLoader:
    """Configuration loader for YAML files with environment-specific overrides."""
    
    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the configuration loader.
        
        Args:
            config_dir: Directory containing configuration files.
                       Defaults to the config directory next to the package.
        """
        if config_dir is None:
            current_dir = Path(__file__).parent.parent.parent
            self.config_dir = current_dir / "config"
        else:
            self.config_dir = Path(config_dir)
    
    def load_config(self, environment: Optional[str] = None) -> ClientConfig:
        """Load configuration for the specified environment.
        
        Args:
            environment: Environment name (development, production, etc.).
                        If None, will try to detect from ENVIRONMENT variable.
                        
        Returns:
            Loaded and validated configuration.
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")
        
        config_data = self._load_base_config()
        
        env_config = self._load_environment_config(environment)
        if env_config:
            config_data = self._merge_configs(config_data, env_config)
        
        config_data = self._substitute_env_vars(config_data)
        
        return self._create_client_config(config_data)
    
    def _load_base_config(self) -> Dict[str, Any]:
        """Load the base client configuration."""
        base_config_path = self.config_dir / "client.yaml"
        if base_config_path.exists():
            return self._load_yaml_file(base_config_path)
        return {}
    
    def _load_environment_config(self, environment: str) -> Optional[Dict[str, Any]]:
        """Load environment-specific configuration."""
        env_config_path = self.config_dir / f"{environment}.yaml"
        if env_config_path.exists():
            return self._load_yaml_file(env_config_path)
        return None
    
    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load and parse a YAML file."""
        try:
            with open(file_path, 'r') as file:
                return yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {file_path}: {e}")
            return {}
    
    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = base.copy()
        
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def _substitute_env_vars(self, config: Any) -> Any:
        """Substitute environment variables in configuration values."""
        if isinstance(config, dict):
            return {key: self._substitute_env_vars(value) for key, value in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            return self._substitute_string_env_vars(config)
        else:
            return config
    
    def _substitute_string_env_vars(self, value: str) -> str:
        """Substitute environment variables in a string value."""
        # Handle ${VAR_NAME} and ${VAR_NAME:default} format
        def replace_env_var(match):
            var_spec = match.group(1)
            if ':' in var_spec:
                var_name, default_value = var_spec.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_spec, match.group(0))
        
        return re.sub(r'\$\{([^}]+)\}', replace_env_var, value)
    
    def _create_client_config(self, config_data: Dict[str, Any]) -> ClientConfig:
        """Create a ClientConfig object from configuration data."""
        authority_config = AuthorityConfig(**(config_data.get("authority") or {}))
        logging_config = LoggingConfig(**(config_data.get("logging") or {}))
        
        return ClientConfig(
            authority=authority_config,
            logging=logging_config,
            raw_config=config_data
        )


# Global configuration instance
_config_loader = ConfigLoader()
_client_config: Optional[ClientConfig] = None


def get_config() -> ClientConfig:
    """Get the current client configuration."""
    global _client_config
    if _client_config is None:
        _client_config = _config_loader.load_config()
    return _client_config


def reload_config(environment: Optional[str] = None) -> ClientConfig:
    """Reload the client configuration."""
    global _client_config
    _client_config = _config_loader.load_config(environment)
    return _client_config


def configure_logging(config: Optional[ClientConfig] = None) -> None:
    """Apply the logging section of ``config``, or of the current configuration."""
    if config is None:
        config = get_config()
    setup_logging(
        log_level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file or None
    )


__all__ = [
    "AuthorityConfig",
    "LoggingConfig",
    "ClientConfig",
    "ConfigLoader",
    "get_config",
    "reload_config",
    "configure_logging",
    "get_logger",
    "setup_logging",
    "StructuredLogger",
]
