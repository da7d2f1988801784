"""
Hyperswitch Environment Presets

Base URLs documented for each Hyperswitch environment, used to seed the
variable environment for collection requests.
"""
from typing import Dict, Optional

from ..config import settings
from ..models.environment import VariableEnvironment


# Environment name → API base URL
BASE_URLS: Dict[str, str] = {
    "sandbox": "https://sandbox.hyperswitch.io",
    "production": "https://api.hyperswitch.io",
}


def get_base_url(mode: str) -> str:
    """
    Base URL for an environment.

    Raises:
        ValueError: If the environment is unknown
    """
    try:
        return BASE_URLS[mode.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown environment '{mode}'. Must be one of {', '.join(BASE_URLS)}."
        )


def build_environment(mode: Optional[str] = None, **variables: str) -> VariableEnvironment:
    """
    Variable environment seeded with baseUrl (and api_key when configured).

    Args:
        mode: "sandbox" or "production" (defaults to settings.environment)
        **variables: Extra bindings; override the seeded ones

    Example:
        build_environment("sandbox", payment_id="pay_123")
    """
    mode = mode or settings.environment
    values = {"baseUrl": get_base_url(mode)}
    if settings.api_key:
        values["api_key"] = settings.api_key
    values.update(variables)
    return VariableEnvironment(name=mode.lower(), variables=values)
