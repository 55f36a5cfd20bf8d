"""YAML configuration loading and schema validation."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import yaml
from jsonschema import validate, ValidationError

from .calculations import DUE_SOON_KM

DEFAULT_CONFIG_FILE = "fleet.yaml"
DEFAULT_DATA_FILE = "bus_data.txt"
DEFAULT_REPORT_FILE = "fleet_report.csv"


class ConfigError(Exception):
    """Raised when a config file cannot be read or fails validation."""


@dataclass
class Config:
    """Tracker settings. Every field has a working default."""

    data_file: str = DEFAULT_DATA_FILE
    report_file: str = DEFAULT_REPORT_FILE
    due_soon_km: float = DUE_SOON_KM
    log_level: str = "WARNING"
    log_file: Optional[str] = None


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_config_file(filepath: Union[str, Path], schema: dict) -> List[str]:
    """Validate a config YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data or {}, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def load_config(filename: Optional[Union[str, Path]] = None) -> Config:
    """
    Load settings from a YAML file.

    With no filename, fleet.yaml in the working directory is used when it
    exists; otherwise defaults apply. An explicit filename must exist.
    """
    if filename is None:
        if not Path(DEFAULT_CONFIG_FILE).exists():
            return Config()
        filename = DEFAULT_CONFIG_FILE

    errors = validate_config_file(filename, load_schema())
    if errors:
        raise ConfigError(f"{filename}: " + "; ".join(e.strip() for e in errors))

    with open(filename) as f:
        data = yaml.safe_load(f) or {}

    config = Config()
    if "dataFile" in data:
        config.data_file = data["dataFile"]
    if "reportFile" in data:
        config.report_file = data["reportFile"]
    if "dueSoonKm" in data:
        config.due_soon_km = float(data["dueSoonKm"])
    if "logLevel" in data:
        config.log_level = data["logLevel"].upper()
    if data.get("logFile"):
        config.log_file = data["logFile"]
    return config
