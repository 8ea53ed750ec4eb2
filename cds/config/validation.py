"""
Configuration validation module.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

from cds.domain.models import ADDRESS_PATTERN

KNOWN_KEYS = [
    "BACKEND",
    "RPC_URL",
    "DEPLOYER_ADDRESS",
    "BUILD_DIR",
    "GAS_LIMIT",
    "CONFIRMATION_TIMEOUT",
    "POLL_INTERVAL",
    "RECORD_FILE",
    "LOG_LEVEL",
    "LIBRARY_LOG_LEVEL",
    "LOG_FILE",
]


@dataclass
class ValidationResult:
    """Result of a configuration validation."""

    is_valid: bool
    message: str


def validate_backend(value: str) -> ValidationResult:
    """Validate backend name."""
    valid_backends = ["rpc", "memory"]
    if value in valid_backends:
        return ValidationResult(True, "Valid backend")
    return ValidationResult(
        False, f"Invalid backend. Must be one of: {', '.join(valid_backends)}"
    )


def validate_rpc_url(url: str) -> ValidationResult:
    """Validate JSON-RPC endpoint URL."""
    valid_schemes = ["http", "https"]
    parsed = urlparse(url)
    if parsed.scheme not in valid_schemes:
        return ValidationResult(
            False, f"Invalid RPC URL scheme. Must be one of: {', '.join(valid_schemes)}"
        )
    if not parsed.netloc:
        return ValidationResult(False, "Invalid RPC URL: missing host")
    return ValidationResult(True, "Valid RPC URL")


def validate_address(address: str) -> ValidationResult:
    """Validate deployer address format."""
    if ADDRESS_PATTERN.match(address):
        return ValidationResult(True, "Valid address")
    return ValidationResult(False, "Invalid address. Expected 0x followed by 40 hex digits")


def validate_build_dir(path: str) -> ValidationResult:
    """Validate build artifact directory."""
    if not Path(path).is_dir():
        return ValidationResult(False, f"Build directory does not exist: {path}")
    return ValidationResult(True, "Valid build directory")


def validate_positive_number(value: str, key: str, integer: bool = False) -> ValidationResult:
    """Validate a positive number setting."""
    try:
        number = int(value) if integer else float(value)
    except ValueError:
        kind = "an integer" if integer else "a number"
        return ValidationResult(False, f"{key} must be {kind}")
    if number <= 0:
        return ValidationResult(False, f"{key} must be positive")
    return ValidationResult(True, f"Valid {key}")


def validate_log_level(level: str) -> ValidationResult:
    """Validate log level."""
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if level.upper() in valid_levels:
        return ValidationResult(True, "Valid log level")
    return ValidationResult(
        False, f"Invalid log level. Must be one of: {', '.join(valid_levels)}"
    )


def validate_file_path(path: str, key: str) -> ValidationResult:
    """Validate that a file's parent directory exists."""
    parent = Path(path).parent
    if not parent.exists():
        return ValidationResult(False, f"Directory for {key} does not exist: {parent}")
    return ValidationResult(True, f"Valid {key} path")


def validate_config(config: Dict[str, Optional[str]]) -> Dict[str, ValidationResult]:
    """Validate all configuration settings.

    Unset (None) values are skipped; unknown keys are reported as invalid.
    """
    results = {}

    for key, value in config.items():
        if key not in KNOWN_KEYS:
            results[key] = ValidationResult(False, f"Invalid configuration key: {key}")

    def present(key: str) -> bool:
        return config.get(key) is not None

    if present("BACKEND"):
        results["BACKEND"] = validate_backend(config["BACKEND"])

    if present("RPC_URL"):
        results["RPC_URL"] = validate_rpc_url(config["RPC_URL"])

    if present("DEPLOYER_ADDRESS"):
        results["DEPLOYER_ADDRESS"] = validate_address(config["DEPLOYER_ADDRESS"])

    if present("BUILD_DIR"):
        results["BUILD_DIR"] = validate_build_dir(config["BUILD_DIR"])

    if present("GAS_LIMIT"):
        results["GAS_LIMIT"] = validate_positive_number(
            config["GAS_LIMIT"], "GAS_LIMIT", integer=True
        )

    for key in ("CONFIRMATION_TIMEOUT", "POLL_INTERVAL"):
        if present(key):
            results[key] = validate_positive_number(config[key], key)

    for key in ("LOG_LEVEL", "LIBRARY_LOG_LEVEL"):
        if present(key):
            results[key] = validate_log_level(config[key])

    for key in ("RECORD_FILE", "LOG_FILE"):
        if present(key):
            results[key] = validate_file_path(config[key], key)

    return results
