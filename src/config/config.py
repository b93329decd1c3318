import configparser
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_PATH = Path(os.getenv("PROFILE_ANALYZER_CONFIG", BASE_DIR / "config.ini"))

load_dotenv()

config = configparser.ConfigParser()
config.read(CONFIG_PATH)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
