from __future__ import annotations

"""Environment-driven configuration for endpoint overrides.

Recognized variables:
    URLF_PROTOCOL, URLF_HOSTNAME, URLF_PORT, URLF_USERNAME, URLF_PASSWORD

Unset or blank variables leave the corresponding field unset.
"""

import os
from dataclasses import fields, replace
from typing import Mapping, Optional

from urlf.constants import ENV_HOSTNAME, ENV_PASSWORD, ENV_PORT, ENV_PROTOCOL, ENV_USERNAME
from urlf.core.errors import ConfigurationError
from urlf.core.models import OverrideOptions


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> OverrideOptions:
    """Build OverrideOptions from URLF_* variables of *environ* (os.environ by default)."""
    env = os.environ if environ is None else environ

    def _get(name: str) -> Optional[str]:
        val = (env.get(name) or '').strip()
        return val or None

    port_raw = _get(ENV_PORT)
    port: Optional[int] = None
    if port_raw is not None:
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigurationError(f'{ENV_PORT} must be an integer, got {port_raw!r}', field='port') from None

    return OverrideOptions(
        protocol=_get(ENV_PROTOCOL),
        hostname=_get(ENV_HOSTNAME),
        port=port,
        username=_get(ENV_USERNAME),
        password=_get(ENV_PASSWORD),
    )


def merge_options(base: OverrideOptions, overrides: OverrideOptions) -> OverrideOptions:
    """Overlay the set (truthy) fields of *overrides* onto *base*."""
    changes = {
        f.name: getattr(overrides, f.name)
        for f in fields(overrides)
        if getattr(overrides, f.name)
    }
    return replace(base, **changes) if changes else base
