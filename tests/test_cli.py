#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line tests for `urlf`: argument decoding, overrides from flags and
environment, --parse output and exit codes.
"""
from __future__ import annotations

import io
import json
import os
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from typing import Dict, Sequence, Tuple
from unittest import mock

PROJECT_SRC = Path(__file__).resolve().parents[1] / "src"
if str(PROJECT_SRC) not in sys.path:
    sys.path.insert(0, str(PROJECT_SRC))

from urlf import cli  # noqa: E402
from urlf.core.errors import ConfigurationError, TemplateSyntaxError  # noqa: E402
from urlf.core.values import QuerySet  # noqa: E402

_BLANK_ENV: Dict[str, str] = {
    "URLF_PROTOCOL": "",
    "URLF_HOSTNAME": "",
    "URLF_PORT": "",
    "URLF_USERNAME": "",
    "URLF_PASSWORD": "",
    "DEBUG": "",
}


class CliBaseTest(unittest.TestCase):
    """Utility mix-in that runs the CLI with a controlled environment."""

    def _run(self, argv: Sequence[str], env: Dict[str, str] | None = None) -> str:
        with mock.patch.dict(os.environ, {**_BLANK_ENV, **(env or {})}):
            return cli.run(argv)

    def _main(self, argv: Sequence[str]) -> Tuple[int, str]:
        buf = io.StringIO()
        with mock.patch.dict(os.environ, _BLANK_ENV), redirect_stdout(buf):
            with self.assertRaises(SystemExit) as cm:
                cli.main(argv)
        return cm.exception.code, buf.getvalue()


# --------------------------------------------------------------------------- #
#  1. Argument decoding                                                       #
# --------------------------------------------------------------------------- #
class DecodeArgTests(unittest.TestCase):
    def test_json_values(self) -> None:
        self.assertEqual(cli.decode_arg("1000"), 1000)
        self.assertIsNone(cli.decode_arg("null"))
        self.assertEqual(cli.decode_arg('["a", 1, null]'), ["a", 1, None])
        self.assertEqual(cli.decode_arg('"quoted"'), "quoted")

    def test_object_becomes_query_set(self) -> None:
        value = cli.decode_arg('{"k": ["a", "b"], "z": 1}')
        self.assertIsInstance(value, QuerySet)
        self.assertEqual(value, {"k": ["a", "b"], "z": ["1"]})

    def test_plain_text(self) -> None:
        self.assertEqual(cli.decode_arg("bob"), "bob")
        self.assertEqual(cli.decode_arg("a/b c"), "a/b c")

    def test_unsupported_json_kept_as_text(self) -> None:
        self.assertEqual(cli.decode_arg("true"), "true")
        self.assertEqual(cli.decode_arg("1.5"), "1.5")


# --------------------------------------------------------------------------- #
#  2. run()                                                                   #
# --------------------------------------------------------------------------- #
class RunTests(CliBaseTest):
    def test_format(self) -> None:
        self.assertEqual(self._run(["http://example.com/users/{}/", '["a", "b", 1000]']),
                         "http://example.com/users/a/b/1000/")

    def test_null_argument(self) -> None:
        self.assertEqual(self._run(["http://example.com/?key={}", "null"]), "http://example.com/")

    def test_query_set_argument(self) -> None:
        self.assertEqual(self._run(["/s?key=old&{}", '{"key": ["a", "b"], "key2": "v"}']),
                         "/s?key=a&key=b&key2=v")

    def test_hostname_flag(self) -> None:
        self.assertEqual(self._run(["--no-env", "--hostname", "https://api.example.com", "http://x/{}", "1"]),
                         "https://api.example.com/1")

    def test_env_override(self) -> None:
        out = self._run(["http://example.com/{}", "1"], env={"URLF_PORT": "8080", "URLF_PROTOCOL": "https"})
        self.assertEqual(out, "https://example.com:8080/1")

    def test_flags_win_over_env(self) -> None:
        out = self._run(["--hostname", "b.example", "http://x/"], env={"URLF_HOSTNAME": "a.example"})
        self.assertEqual(out, "http://b.example/")

    def test_no_env(self) -> None:
        out = self._run(["--no-env", "http://x/"], env={"URLF_HOSTNAME": "a.example"})
        self.assertEqual(out, "http://x/")

    def test_credentials_flags(self) -> None:
        out = self._run(["--username", "u", "--password", "p", "http://example.com/"])
        self.assertEqual(out, "http://u:p@example.com/")

    def test_parse_only(self) -> None:
        data = json.loads(self._run(["--parse", "http://{}/a?q={}"]))
        self.assertEqual(data["protocol"], {"static": "http"})
        self.assertEqual(data["hostname"], {"param": 0})
        self.assertEqual(data["queries"], [{"key": "q", "param": 1}])
        self.assertEqual(data["placeholders"], 2)
        self.assertFalse(data["credentials"])

    def test_parse_only_applies_overrides(self) -> None:
        data = json.loads(self._run(["--parse", "--protocol", "https", "http://x/"]))
        self.assertEqual(data["protocol"], {"static": "https"})

    def test_errors_propagate(self) -> None:
        with self.assertRaises(TemplateSyntaxError):
            self._run(["://x"])
        with self.assertRaises(ConfigurationError):
            self._run(["--username", "u", "http://x/"])
        with self.assertRaises(ConfigurationError):
            self._run(["http://x/"], env={"URLF_PORT": "abc"})


# --------------------------------------------------------------------------- #
#  3. main() exit codes                                                       #
# --------------------------------------------------------------------------- #
class MainTests(CliBaseTest):
    def test_success(self) -> None:
        code, out = self._main(["/a/{}", "1"])
        self.assertEqual(code, 0)
        self.assertEqual(out, "/a/1\n")

    def test_format_error(self) -> None:
        with self.assertLogs("urlf", level="ERROR") as logs:
            code, out = self._main(["http://example.com:{}", '"80"'])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertTrue(any("port" in line for line in logs.output))
        self.assertEqual(logs.records[-1].context, {"error": "BindingError", "slot": "port", "index": 0})

    def test_unexpected_error(self) -> None:
        with mock.patch.object(cli, "run", side_effect=RuntimeError("boom")):
            with self.assertLogs("urlf", level="ERROR"):
                code, _ = self._main(["/a"])
        self.assertEqual(code, 1)

    def test_keyboard_interrupt(self) -> None:
        with mock.patch.object(cli, "run", side_effect=KeyboardInterrupt):
            with self.assertLogs("urlf", level="ERROR"):
                code, _ = self._main(["/a"])
        self.assertEqual(code, 130)


if __name__ == "__main__":
    unittest.main()
