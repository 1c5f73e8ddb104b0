"""Configuration management for git-cms."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union

from dotenv import load_dotenv


DEFAULTS: Dict[str, Any] = {
    'gateway': {
        'provider': 'github',
        'rate_limit': 10,
        'timeout': 30,
        'retry_count': 0,
        'page_size': 100,
        'verify_ssl': True
    },
    'content': {
        'root': 'content',
        'branch_prefix': 'content/',
        'fallback_branch': 'main'
    },
    'server': {
        'host': '127.0.0.1',
        'port': 8000,
        'cors_origins': ['*']
    },
    'logging': {
        'level': 'INFO',
        'file': 'logs/git-cms.log'
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration manager that merges YAML config with environment variables."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        load_dotenv()

        config_path = config_path or os.getenv('GIT_CMS_CONFIG')
        if config_path:
            self.config_path = Path(config_path)
        else:
            possible_paths = [
                Path("config/config.yaml"),
                Path("config.yaml"),
                Path.home() / ".git-cms" / "config.yaml"
            ]

            for path in possible_paths:
                if path.exists():
                    self.config_path = path
                    break
            else:
                self.config_path = possible_paths[0]

        self._config = _merge(DEFAULTS, self._load_config())

        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        return {}

    def _apply_env_overrides(self):
        """Apply environment variable overrides to configuration."""
        gateway = self._config.setdefault('gateway', {})

        for env_name, key in (
            ('GIT_CMS_PROVIDER', 'provider'),
            ('GIT_CMS_URL', 'url'),
            ('GIT_CMS_TOKEN', 'token'),
            ('GIT_CMS_REPOSITORY', 'repository')
        ):
            if os.getenv(env_name):
                gateway[key] = os.getenv(env_name)

        if os.getenv('GIT_CMS_RATE_LIMIT'):
            gateway['rate_limit'] = float(os.getenv('GIT_CMS_RATE_LIMIT'))

        if os.getenv('GIT_CMS_TIMEOUT'):
            gateway['timeout'] = int(os.getenv('GIT_CMS_TIMEOUT'))

        if os.getenv('GIT_CMS_CONTENT_ROOT'):
            self._config.setdefault('content', {})['root'] = os.getenv('GIT_CMS_CONTENT_ROOT')

        if os.getenv('GIT_CMS_DEFAULT_BRANCH'):
            self._config.setdefault('content', {})['fallback_branch'] = os.getenv('GIT_CMS_DEFAULT_BRANCH')

        if os.getenv('GIT_CMS_LOG_LEVEL'):
            self._config.setdefault('logging', {})['level'] = os.getenv('GIT_CMS_LOG_LEVEL')

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'gateway.timeout')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_gateway_config(self) -> Dict[str, Any]:
        """Get hosting provider configuration."""
        return self.get('gateway', {})

    def get_content_root(self) -> str:
        return self.get('content.root', 'content').strip('/')

    def get_branch_prefix(self) -> str:
        return self.get('content.branch_prefix', 'content/')

    def get_fallback_branch(self) -> str:
        return self.get('content.fallback_branch', 'main')

    def get_server_config(self) -> Dict[str, Any]:
        return self.get('server', {})

    def get_log_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get('logging', {})

    def validate(self) -> bool:
        """Validate required configuration values.

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If required configuration is missing
        """
        gateway = self.get_gateway_config()

        if gateway.get('provider') not in ('github', 'gitlab'):
            raise ValueError(f"Unsupported provider '{gateway.get('provider')}'. Use 'github' or 'gitlab'.")

        if not gateway.get('token'):
            raise ValueError("API token not configured. Set GIT_CMS_TOKEN environment variable.")

        if not gateway.get('repository'):
            raise ValueError("Repository not configured. Set GIT_CMS_REPOSITORY environment variable.")

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary.

        Returns:
            Copy of the configuration dictionary
        """
        return self._config.copy()

    def __repr__(self) -> str:
        return f"Config(config_path={self.config_path})"
