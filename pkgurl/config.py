import tomllib
import os
import logging
from typing import Dict, Any

CONFIG_FILE_PATH = "pyproject.toml"

DEFAULT_CONFIG = {
    "logging_level": "WARNING",
    "allow_scheme_slashes": True,  # Accept 'pkg://type/name' when decoding
}

def get_logging_level_from_string(level_str: str) -> int:
    """Converts a logging level string to its integer value."""
    return getattr(logging, level_str.upper(), logging.WARNING)

def load_config(path: str = CONFIG_FILE_PATH) -> Dict[str, Any]:
    """
    Loads pkgurl configuration from the `[tool.pkgurl]` table of a pyproject.toml.
    Falls back to default values if the file or specific keys are not found.
    The environment variable `PKGURL_LOGGING_LEVEL` overrides `logging_level`.
    """
    config = DEFAULT_CONFIG.copy()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
            tool_pkgurl_config = data.get("tool", {}).get("pkgurl", {})

            config["logging_level"] = tool_pkgurl_config.get("logging_level", config["logging_level"])

            allow_scheme_slashes = tool_pkgurl_config.get("allow_scheme_slashes", config["allow_scheme_slashes"])
            if isinstance(allow_scheme_slashes, bool):
                config["allow_scheme_slashes"] = allow_scheme_slashes
            else:
                logging.getLogger(__name__).warning(
                    f"Invalid value for 'allow_scheme_slashes' in {path}. Using default. "
                    f"Expected a boolean, got: {allow_scheme_slashes!r}"
                )

    except FileNotFoundError:
        logging.getLogger(__name__).info(f"{path} not found. Using default configurations.")
    except tomllib.TOMLDecodeError:
        logging.getLogger(__name__).error(f"Error decoding {path}. Using default configurations.")

    config["logging_level"] = os.getenv("PKGURL_LOGGING_LEVEL", config["logging_level"])

    # Convert logging_level string to its integer representation.
    config["logging_level_int"] = get_logging_level_from_string(str(config["logging_level"]))

    return config

# Load configuration once when the module is imported.
PKGURL_CONFIG = load_config()

if __name__ == '__main__':
    print("Loaded pkgurl configuration:")
    for key, value in PKGURL_CONFIG.items():
        print(f"  {key}: {value}")
