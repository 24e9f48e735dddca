"""
Relay configuration, read once from the environment (and .env) at startup.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the project root, falling back to the working directory
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv()


class Settings(BaseSettings):
    GATEWAY_URL: str = "http://localhost:8545"
    NETWORK_ID: int = 31337
    # Defaults to the address of PRIVATE_KEY when unset
    ACCOUNT_ID: Optional[str] = None
    PRIVATE_KEY: str
    CONTRACT_ADDRESS: str
    CONTRACT_VIEW_METHODS: list[str] = ["validateSignature"]
    CONTRACT_CHANGE_METHODS: list[str] = ["signTerms"]
    CONTRACT_ABI_PATH: Optional[str] = None

    HOST: str = "0.0.0.0"
    PORT: int = 4001
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore", frozen=True
    )

    @property
    def contract_methods(self) -> list[str]:
        return [*self.CONTRACT_VIEW_METHODS, *self.CONTRACT_CHANGE_METHODS]


@lru_cache
def get_settings() -> Settings:
    """Build the process-wide settings on first use."""
    return Settings()
