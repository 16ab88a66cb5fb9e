from __future__ import annotations

"""
Endpoint override – replace protocol/hostname/port/credentials on a parsed
template before substitution.

The source template is never modified: a new Template is returned through
`dataclasses.replace`, sharing the (immutable) path, query and fragment
slots with the original. This keeps cached templates free of per-formatter
settings.
"""

import re
from dataclasses import replace
from typing import Optional

from urlf.constants import PORT_MAX, PORT_MIN
from urlf.core.errors import ConfigurationError
from urlf.core.models import OverrideOptions, Slot, Template

_HOST_RX = re.compile(r'^(?P<protocol>\w+://)?(?P<hostname>[^:]+)(?P<port>:\d+)?')


def _checked_port(port: int, *, field: str) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not PORT_MIN <= port <= PORT_MAX:
        raise ConfigurationError(
            f'port must be an integer in range {PORT_MIN}-{PORT_MAX}, got {port!r}', field=field
        )
    return port


def split_authority(hostname: str) -> tuple[Optional[str], Optional[str], Optional[int]]:
    """Split 'scheme://host:port' into its parts; missing parts are None.

    >>> split_authority('https://api.example.com:8080')
    ('https', 'api.example.com', 8080)
    >>> split_authority('api.example.com')
    (None, 'api.example.com', None)
    """
    m = _HOST_RX.match(hostname)
    if m is None:
        raise ConfigurationError(f'invalid hostname override {hostname!r}', field='hostname')
    protocol = m.group('protocol')
    port = m.group('port')
    return (
        protocol[:-3] if protocol else None,
        m.group('hostname'),
        _checked_port(int(port[1:]), field='hostname') if port else None,
    )


def apply_override(template: Template, options: Optional[OverrideOptions]) -> Template:
    """Return *template* with the endpoint parts of *options* applied.

    Precedence: an explicit `protocol` / `port` option wins over the value
    decomposed from `hostname`, which wins over the template's own slots.

    Raises:
        ConfigurationError: exactly one of username/password is given, or a
            port is outside 1-65535.
    """
    if options is None or options.is_empty():
        return template

    protocol, hostname, port = template.protocol, template.hostname, template.port

    if options.hostname:
        h_protocol, h_hostname, h_port = split_authority(options.hostname)
        if h_protocol:
            protocol = Slot.static(h_protocol)
        if h_hostname:
            hostname = Slot.static(h_hostname)
        if h_port is not None:
            port = Slot.static(h_port)
    if options.protocol:
        protocol = Slot.static(options.protocol)
    if options.port:
        port = Slot.static(_checked_port(options.port, field='port'))

    username, password = template.username, template.password
    if options.username and options.password:
        username, password = options.username, options.password
    elif options.username or options.password:
        raise ConfigurationError('both username and password must be set', field='username' if options.username else 'password')

    return replace(
        template,
        protocol=protocol,
        hostname=hostname,
        port=port,
        username=username,
        password=password,
    )
