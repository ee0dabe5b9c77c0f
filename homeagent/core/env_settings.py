# homeagent/core/env_settings.py
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_path() -> Path:
    BASE_DIR = Path(__file__).resolve().parents[2]
    ENV_PATH = BASE_DIR / 'homeagent.env'
    if not ENV_PATH.exists():
        # Fallback to the system-wide location used by the service unit
        ENV_PATH = Path('/etc/homeagent/homeagent.env')
    return ENV_PATH


class EnvSettings(BaseSettings):
    APP_NAME: str = 'IOT HOME Agent'

    # Configuration document
    CONFIG_FILE: str = 'settings.json'

    # Hardware
    W1_BUS_ROOT: str = '/sys/bus/w1'
    RECOVERY_DWELL_SECONDS: float = 10.0
    DHT_RETRIES: int = 10
    ONEWIRE_DISCOVERY_ATTEMPTS: int = 3

    # Smart switches
    SMART_SWITCH_PORT: int = 8081

    # Bridge REST surface
    API_HOST: str = '0.0.0.0'
    API_PORT: int = 8000

    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(
        env_file=str(get_env_path()),
        env_file_encoding='utf-8',
        extra='ignore',
        validate_assignment=True,
    )

    @property
    def config_path(self) -> Path:
        """Get the configuration document path as a Path object."""
        return Path(self.CONFIG_FILE)

    @property
    def w1_bus_root(self) -> Path:
        return Path(self.W1_BUS_ROOT)


# Create a singleton instance
env = EnvSettings()
