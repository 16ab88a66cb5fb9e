from __future__ import annotations

"""Project-wide constants used across modules.

This module isolates the template grammar constants and environment variable
names to reduce cross-module coupling.
"""

# Placeholder marker. Each occurrence consumes one positional argument.
PLACEHOLDER: str = '{}'

# Closed separator set, longest first so '://' wins over '//' and ':'.
SEPARATORS: tuple[str, ...] = ('://', '//', ':', '/', '?', '=', '&', '#', '@')

PORT_MIN: int = 1
PORT_MAX: int = 65535

ENV_PROTOCOL: str = 'URLF_PROTOCOL'
ENV_HOSTNAME: str = 'URLF_HOSTNAME'
ENV_PORT: str = 'URLF_PORT'
ENV_USERNAME: str = 'URLF_USERNAME'
ENV_PASSWORD: str = 'URLF_PASSWORD'
ENV_TRACE: str = 'URLF_TRACE'
