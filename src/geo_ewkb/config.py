"""
Load codec options from YAML.

Reads the path from the GEO_EWKB_CONFIG env var unless one is passed.
Without either, the defaults apply (little-endian, SRID 4326).

Supports ${ENV_VAR} interpolation in YAML string values:

    codec:
      byte_order: little
      srid: ${DEFAULT_SRID}
"""

import logging
import os
import re
from typing import Optional

import yaml

from .models import CodecOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GEO_EWKB_CONFIG"

_ENV_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value):
    """Replace ${VAR} placeholders with environment variable values."""
    if isinstance(value, str):
        return _ENV_RE.sub(
            lambda m: os.environ.get(m.group(1), m.group(0)), value
        )
    return value


def load_options(path: Optional[str] = None) -> CodecOptions:
    """Read CodecOptions from the ``codec`` section of a YAML file."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if path is None:
        return CodecOptions()

    with open(path) as f:
        config = yaml.safe_load(f) or {}
    codec_config = {
        k: _resolve_env_vars(v) for k, v in (config.get("codec") or {}).items()
    }
    options = CodecOptions(**codec_config)
    logger.info(
        "Loaded codec options from %s (byte_order=%s, srid=%d)",
        path,
        options.byte_order.name,
        options.srid,
    )
    return options
