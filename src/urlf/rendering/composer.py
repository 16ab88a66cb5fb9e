from __future__ import annotations

"""
composer – serialize a `UrlRecord` into its final, percent-encoded form.

Escaping per component (RFC 3986, using `urllib.parse`):
    userinfo   unreserved + sub-delims (':' and '@' escaped)
    host       unreserved + sub-delims + ':' '[' ']' (IPv6 literals)
    path       unreserved + '/' and "$&+,:;=@"; non-ASCII → UTF-8 %XX
    query      application/x-www-form-urlencoded (space → '+'), repeated keys
    fragment   unreserved + "$&+,/:;=?@!()*"
"""

from urllib.parse import quote, urlencode

from urlf.core.interfaces.composer import UrlComposerProtocol
from urlf.core.models import UrlRecord

_USERINFO_SAFE = "!$&'()*+,;="
_HOST_SAFE = "!$&'()*+,;=:[]"
_PATH_SAFE = '/$&+,:;=@'
_FRAGMENT_SAFE = '$&+,/:;=?@!()*'


class UrllibUrlComposer(UrlComposerProtocol):
    def compose(self, record: UrlRecord) -> str:  # type: ignore[override]
        out: list[str] = []
        has_user = bool(record.username)

        if record.scheme:
            out.append(record.scheme + ':')
        if record.scheme or record.host or has_user:
            if record.host or record.path or has_user:
                out.append('//')
            if has_user:
                out.append(quote(record.username, safe=_USERINFO_SAFE))
                out.append(':' + quote(record.password, safe=_USERINFO_SAFE))
                out.append('@')
            if record.host:
                out.append(quote(record.host, safe=_HOST_SAFE))
                if record.port is not None:
                    out.append(f':{record.port}')

        path = quote(record.path, safe=_PATH_SAFE)
        if path and not path.startswith('/') and record.host:
            out.append('/')
        out.append(path)

        if record.query:
            out.append('?' + urlencode(record.query))
        if record.fragment:
            out.append('#' + quote(record.fragment, safe=_FRAGMENT_SAFE))
        return ''.join(out)
