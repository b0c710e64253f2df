import os
import json
import logging
from dotenv import load_dotenv

from constants import DB_DETAILS, SERVER_DETAILS

logger = logging.getLogger(__name__)

# Optional JSON file with the same keys as DEFAULT_CONFIG
CONFIG_FILE_ENV = "GATEWAY_CONFIG"

DEFAULT_CONFIG = {
    "db_host": "localhost",
    "db_user": "root",
    "db_password": "",
    "db_port": DB_DETAILS["port"],
    "db_name": DB_DETAILS["db_name"],
    "server_host": SERVER_DETAILS["host"],
    "server_port": SERVER_DETAILS["port"],
}

# Environment variable -> config key
ENV_KEYS = {
    "DB_HOST": "db_host",
    "DB_USER": "db_user",
    "DB_PASSWORD": "db_password",
    "DB_PORT": "db_port",
    "DB_NAME": "db_name",
    "SERVER_HOST": "server_host",
    "SERVER_PORT": "server_port",
}

INT_KEYS = ("db_port", "server_port")


def load_config_file(path):
    """Load gateway settings from a local JSON configuration file."""
    try:
        with open(path, "r") as f:
            details = json.load(f)
        logger.info(f"Loaded gateway configuration from {path}.")
        return details
    except Exception as e:
        logger.error(f"Failed to load gateway configuration from {path}: {e}")
        raise


def load_config(environ=None):
    """Resolve the gateway configuration: defaults, then JSON file, then environment."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    config = dict(DEFAULT_CONFIG)

    config_path = environ.get(CONFIG_FILE_ENV)
    if config_path:
        details = load_config_file(config_path)
        config.update({key: value for key, value in details.items() if key in DEFAULT_CONFIG})

    for env_name, key in ENV_KEYS.items():
        if environ.get(env_name) is not None:
            config[key] = environ[env_name]

    for key in INT_KEYS:
        try:
            config[key] = int(config[key])
        except (TypeError, ValueError):
            raise ValueError(f"Invalid value for {key}: {config[key]!r}")

    return config


def db_config(config, use_database=True):
    """Connection parameters for the driver; the setup shape omits the database."""
    params = {
        "host": config["db_host"],
        "user": config["db_user"],
        "password": config["db_password"],
        "port": config["db_port"],
    }
    if use_database:
        params["database"] = config["db_name"]
    return params
