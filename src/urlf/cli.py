from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, List, NoReturn, Optional, Sequence

from urlf.core.errors import FormatError
from urlf.core.interfaces.logging import LoggerFactoryProtocol
from urlf.core.models import OverrideOptions
from urlf.core.values import QuerySet
from urlf.logging.factory import DefaultLoggerFactory
from urlf.logging.helpers import error_context, get_logger
from urlf.rendering.formatter import Formatter
from urlf.rendering.override import apply_override
from urlf.runtime.config import merge_options, options_from_env

logger = get_logger('cli')


def _build_parser() -> argparse.ArgumentParser:
    """Build the `urlf` argument parser."""
    p = argparse.ArgumentParser(
        prog='urlf',
        formatter_class=argparse.RawTextHelpFormatter,
        description=(
            'urlf – build escaped URLs from printf-style templates.\n'
            'Each {} in TEMPLATE is replaced by the matching ARG.'
        ),
        epilog=(
            'ARG values are decoded as JSON when possible:\n'
            '  1000            → integer\n'
            '  null            → omit the slot\n'
            '  \'["a", 1]\'      → list (path segments / repeated query values)\n'
            '  \'{"k": ["v"]}\'  → query set\n'
            'Anything else is used as a literal string.'
        ),
    )
    p.add_argument('template', metavar='TEMPLATE', help='URL template, e.g. "https://{}/users/{}?page={}".')
    p.add_argument('args', metavar='ARG', nargs='*', help='Positional values bound to the placeholders.')

    g_ovr = p.add_argument_group('Endpoint override')
    g_ovr.add_argument('--protocol', metavar='SCHEME', help='Replace the template scheme (env: URLF_PROTOCOL).')
    g_ovr.add_argument(
        '--hostname',
        metavar='HOST',
        help='Replace the template host; may embed scheme and port, e.g. https://api:8080 (env: URLF_HOSTNAME).',
    )
    g_ovr.add_argument('--port', metavar='N', type=int, help='Replace the template port (env: URLF_PORT).')
    g_ovr.add_argument('--username', metavar='USER', help='User name; requires --password (env: URLF_USERNAME).')
    g_ovr.add_argument('--password', metavar='PASS', help='Password; requires --username (env: URLF_PASSWORD).')
    g_ovr.add_argument('--no-env', action='store_true', dest='no_env', help='Ignore URLF_* environment variables.')

    g_misc = p.add_argument_group('Miscellaneous')
    g_misc.add_argument('--parse', action='store_true', dest='parse_only',
                        help='Print the parsed template as JSON instead of formatting it.')
    g_misc.add_argument('--json-logs', action='store_true', dest='json_logs',
                        help='Emit logs in JSON format instead of plain text.')
    g_misc.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    return p


def _configure_logging(enable_json: bool, verbose: bool) -> LoggerFactoryProtocol:
    """Configure process-wide logging, either JSON or plain text."""
    global logger
    factory: LoggerFactoryProtocol = DefaultLoggerFactory(json_logs=enable_json, verbose=verbose)
    logger = factory.get_logger('cli')
    return factory


def decode_arg(raw: str) -> Any:
    """Decode one CLI argument into a urlf value (see the --help epilog)."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(value, dict):
        return QuerySet(value)
    if isinstance(value, bool) or not isinstance(value, (str, int, list, type(None))):
        return raw
    return value


def _options(ns: argparse.Namespace) -> OverrideOptions:
    flags = OverrideOptions(
        protocol=ns.protocol,
        hostname=ns.hostname,
        port=ns.port,
        username=ns.username,
        password=ns.password,
    )
    if ns.no_env:
        return flags
    return merge_options(options_from_env(), flags)


def run(argv: Optional[Sequence[str]] = None) -> str:
    """Parse *argv* and return the text `urlf` would print.

    Raises:
        FormatError: template, argument or override errors.
    """
    ns = _build_parser().parse_args(list(argv) if argv is not None else None)
    _configure_logging(ns.json_logs, ns.verbose)

    formatter = Formatter(_options(ns))
    if ns.parse_only:
        parsed = apply_override(formatter.parse(ns.template), formatter.options)
        return json.dumps(parsed.to_dict(), ensure_ascii=False, indent=2)

    values: List[Any] = [decode_arg(a) for a in ns.args]
    logger.debug('formatting %r with %d argument(s)', ns.template, len(values))
    return formatter.format(ns.template, *values)


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for the `urlf` console script and `python -m urlf`."""
    try:
        sys.stdout.write(run(argv) + '\n')
        raise SystemExit(0)
    except FormatError as exc:
        logger.error('%s', exc, extra={'context': error_context(exc)})
        raise SystemExit(2)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except Exception as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
