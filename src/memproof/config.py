"""
Global configuration for memory commitments.

This module contains environment-specific settings that apply across the package.
"""

import os

_SUPPORTED_MEMPROOF_ENVS: list[str] = ["prod", "test"]

MEMPROOF_ENV = os.environ.get("MEMPROOF_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if MEMPROOF_ENV not in _SUPPORTED_MEMPROOF_ENVS:
    raise ValueError(
        f"Invalid MEMPROOF_ENV environment variable: '{MEMPROOF_ENV}'. "
        f"Supported values: {_SUPPORTED_MEMPROOF_ENVS}"
    )
