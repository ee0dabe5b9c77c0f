# homeagent/core/services/config_io.py
import json
import logging
from pathlib import Path
from typing import Any, Dict

import aiofiles

logger = logging.getLogger(__name__)


class ConfigIO:
    """
    Asynchronous configuration file I/O operations service.
    """
    @staticmethod
    async def read_json_file(file_path: Path) -> Dict[str, Any]:
        """
        Reads a JSON file asynchronously and returns its content as a dictionary.

        Raises FileNotFoundError when the file is absent and
        json.JSONDecodeError when it is not valid JSON.
        """
        async with aiofiles.open(file_path, "r") as file:
            content = await file.read()
        return json.loads(content)

    @staticmethod
    async def write_json_file(file_path: Path, data: Dict[str, Any]) -> None:
        """
        Writes a dictionary to a JSON file asynchronously.
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(file_path, "w") as file:
            await file.write(json.dumps(data, indent=4))
        logger.info(f"Successfully wrote to file: {file_path}")
