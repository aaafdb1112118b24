import logging
import logging.config
from pathlib import Path
import yaml

from .config import PROJECT_ROOT

def setup_logging(verbose: bool = False):
    """Setup logging configuration from configs/logging.yaml."""
    config_path = Path("configs/logging.yaml")
    if not config_path.exists():
        config_path = PROJECT_ROOT / "configs/logging.yaml"
    level = logging.DEBUG if verbose else logging.INFO

    if config_path.exists():
        try:
            with open(config_path, 'rt') as f:
                config_data = yaml.safe_load(f.read())
            logging.config.dictConfig(config_data)
            logging.getLogger("code_remedy").setLevel(level)
        except Exception as e:
            logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')
            logging.warning(f"Failed to load logging config from {config_path}: {e}. Using basic config.")
    else:
        logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')
        logging.debug(f"{config_path} not found. Using basic config.")

    if not verbose:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)
