"""
Configuration validation command.
"""

import os
import click
from dotenv import dotenv_values
from cds.config.validation import KNOWN_KEYS, validate_config, ValidationResult


def print_validation_result(key: str, result: ValidationResult):
    """Print validation result with appropriate formatting."""
    if result.is_valid:
        click.echo(f"✅ {key}: {result.message}")
    else:
        click.echo(f"❌ {key}: {result.message}")


@click.command()
@click.option("--env-file", default=".env", help="Path to .env file")
def validate(env_file: str):
    """Validate CDS configuration."""
    if not os.path.exists(env_file):
        click.echo(f"❌ Environment file not found: {env_file}")
        return

    values = dotenv_values(env_file)
    config = {key: values.get(key, os.getenv(key)) for key in KNOWN_KEYS}
    config.update({k: v for k, v in values.items() if k not in KNOWN_KEYS})

    results = validate_config(config)

    click.echo("\nValidating configuration...")
    click.echo("=" * 40)

    all_valid = True
    for key, result in results.items():
        print_validation_result(key, result)
        if not result.is_valid:
            all_valid = False

    click.echo("=" * 40)
    if all_valid:
        click.echo("\n✨ All configuration settings are valid!")
    else:
        click.echo("\n⚠️  Some configuration settings need attention.")
        click.echo("Please check the messages above and fix any issues.")


if __name__ == "__main__":
    validate()
