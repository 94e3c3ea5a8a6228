import logging
import logging.config
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import settings

DEFAULT_LOGGING_CONFIG_PATH = Path(settings.LOGGING_CONFIG_PATH)


def setup_logging(config_path: Optional[Path] = None) -> None:
    """
    Set up logging configuration from a YAML file.

    Falls back to ``basicConfig`` when the file is missing or cannot be applied.
    Call this once from application startup, not at import time.

    Args:
        config_path (Path): Path to the logging configuration YAML file.
    """
    config_path = config_path or DEFAULT_LOGGING_CONFIG_PATH
    if config_path.exists():
        try:
            with open(config_path, "rt", encoding="utf-8") as f:
                log_config = yaml.safe_load(f.read())
            logging.config.dictConfig(log_config)
            logging.getLogger(__name__).info(f"Logging configured successfully from {config_path}")
        except (OSError, ValueError, TypeError, AttributeError, ImportError, yaml.YAMLError) as e:
            logging.basicConfig(level=logging.INFO)
            logging.error(f"Error loading logging configuration from {config_path}: {e}. Using basicConfig.")
    else:
        logging.basicConfig(level=logging.INFO)
        logging.warning(f"Logging configuration file not found at {config_path}. Using basicConfig.")
