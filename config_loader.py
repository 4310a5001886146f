"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    LIST_FIELDS = (
        'export.code_classes',
        'export.preserve_tags',
        'export.plugins',
        'export.plugin_directories',
    )

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'wordpress.url')
        cls._validate_url(get_nested(config, 'wordpress.url'), 'wordpress.url')

        # Credentials are optional (public REST API), but must be resolved when given
        for credential in ('wordpress.username', 'wordpress.password'):
            if get_nested(config, credential):
                cls._validate_required_field(config, credential)

        if bool(get_nested(config, 'wordpress.username')) != bool(get_nested(config, 'wordpress.password')):
            raise ValueError("wordpress.username and wordpress.password must be given together")

        verify_ssl = get_nested(config, 'wordpress.verify_ssl', True)
        if not isinstance(verify_ssl, bool):
            raise ValueError("wordpress.verify_ssl must be a boolean")

        limit = get_nested(config, 'export.limit')
        if limit is not None:
            if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
                raise ValueError("export.limit must be a positive integer")

        for path in cls.LIST_FIELDS:
            value = get_nested(config, path)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ValueError(f"{path} must be a list of strings")

        plugins = get_nested(config, 'export.plugins') or []
        duplicates = sorted({name for name in plugins if plugins.count(name) > 1})
        if duplicates:
            raise ValueError(f"export.plugins lists plugins more than once: {', '.join(duplicates)}")

        output_dir = get_nested(config, 'export.output_directory')
        if output_dir and os.path.exists(output_dir) and not os.path.isdir(output_dir):
            raise ValueError(f"export.output_directory '{output_dir}' is not a directory")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        rate_limit = get_nested(config, 'advanced.rate_limit', 0.0)
        if isinstance(rate_limit, bool) or not isinstance(rate_limit, (int, float)) or rate_limit < 0:
            raise ValueError("advanced.rate_limit must be a non-negative number")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('wordpress', 'export', 'advanced', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'url', None):
            merged['wordpress']['url'] = args.url

        if getattr(args, 'username', None):
            merged['wordpress']['username'] = args.username

        if getattr(args, 'password', None):
            merged['wordpress']['password'] = args.password

        if getattr(args, 'custom_post_type', None):
            merged['wordpress']['custom_post_type'] = args.custom_post_type

        if getattr(args, 'verify_ssl', None) is not None:
            merged['wordpress']['verify_ssl'] = args.verify_ssl

        if getattr(args, 'limit', None) is not None:
            merged['export']['limit'] = args.limit

        if getattr(args, 'output', None):
            merged['export']['output_directory'] = args.output

        if getattr(args, 'images_dir', None):
            merged['export']['images_directory'] = args.images_dir

        for attr, key in (
            ('code_classes', 'code_classes'),
            ('preserve_tags', 'preserve_tags'),
            ('plugins', 'plugins'),
            ('plugin_dirs', 'plugin_directories'),
        ):
            value = getattr(args, attr, None)
            if value is not None:
                merged['export'][key] = list(value)

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: Optional[str], field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url or '')
        if not parsed.scheme or parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "wordpress.url")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


__all__ = ['ConfigLoader', 'get_nested']
