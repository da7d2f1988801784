"""
Bundled data: the Hyperswitch Postman collection and environment presets.
"""
from .environments import BASE_URLS, build_environment, get_base_url

__all__ = ["BASE_URLS", "build_environment", "get_base_url"]
