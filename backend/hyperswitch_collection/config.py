"""
Hyperswitch Collection Configuration Module

Loads environment variables for collection loading, variable defaults and
redirect signature verification.
"""
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be set as HYPERSWITCH_<FIELD> in the process environment
    or in a local .env file.

    Notes:
    - collection_path overrides the bundled Postman collection
    - api_key and payment_response_hash_key are merchant secrets, never logged
    """

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Collection
    collection_path: Optional[str] = None  # Defaults to data/hyperswitch.postman_collection.json
    environment: Literal["sandbox", "production"] = "sandbox"

    # Merchant credentials
    api_key: Optional[str] = None
    payment_response_hash_key: Optional[str] = None
    signature_algorithm: Literal["HMAC-SHA512", "HMAC-SHA256"] = "HMAC-SHA512"

    class Config:
        env_file = ".env"
        env_prefix = "HYPERSWITCH_"
        case_sensitive = False


# Global settings instance
settings = Settings()
