import json
import logging
from pathlib import Path

from pydantic import ValidationError

from homeagent.core.config.models import AppConfig
from homeagent.core.exceptions import ConfigurationCreated, ConfigurationError
from homeagent.core.services.config_io import ConfigIO

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Loads the settings document once at startup.

    A missing document is replaced by a default template and reported with
    ConfigurationCreated so the operator can edit it and run again.
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    async def load(self) -> AppConfig:
        if not self.config_path.exists():
            await self.write_template()
            raise ConfigurationCreated(self.config_path)

        try:
            data = await ConfigIO.read_json_file(self.config_path)
            config = AppConfig.model_validate(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{self.config_path} is not valid JSON: {e}") from e
        except ValidationError as e:
            raise ConfigurationError(f"{self.config_path} is invalid: {e}") from e

        logger.info(f"Loaded configuration from {self.config_path}")
        if config.debug:
            logger.debug(f"Settings: {config.model_dump()}")
        return config

    async def write_template(self) -> None:
        logger.warning("We detected that the configuration file was not found on this system!")
        await ConfigIO.write_json_file(self.config_path, AppConfig().model_dump(mode="json"))
        logger.warning(f"Created settings file {self.config_path}, edit the configuration and run this program again")
