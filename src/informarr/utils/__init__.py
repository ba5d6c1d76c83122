import os
import re
import secrets
import string
from pathlib import Path

from loguru import logger

root_dir = Path(__file__).resolve().parents[3]

data_dir_path = Path(os.getenv("INFORMARR_DATA_DIR", root_dir / "data"))


def get_version() -> str:
    with open(root_dir / "pyproject.toml") as file:
        pyproject_toml = file.read()

    match = re.search(r'version = "(.+)"', pyproject_toml)
    if match:
        version = match.group(1)
    else:
        raise ValueError("Could not find version in pyproject.toml")
    return version


def generate_api_key():
    """Generate a secure API key for the webhook endpoints."""
    env_key = os.getenv("INFORMARR_API_KEY", "")
    if len(env_key) != 32:
        logger.warning("INFORMARR_API_KEY is unset or not 32 characters, generating a key")
        characters = string.ascii_letters + string.digits

        api_key = "".join(secrets.choice(characters) for _ in range(32))
        logger.warning(f"New api key: {api_key}")
    else:
        api_key = env_key

    return api_key
