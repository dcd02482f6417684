"""Configuration for the linear CLI.

Example:
    >>> from linear_cli.config import LinearSettings
    >>> settings = LinearSettings.load()
    >>> settings.api_url
    'https://api.linear.app/graphql'
"""

from linear_cli.config.settings import LINEAR_API_ENDPOINT, LinearSettings, default_config_path

__all__ = ["LINEAR_API_ENDPOINT", "LinearSettings", "default_config_path"]
