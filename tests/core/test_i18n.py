# tests/core/test_i18n.py
from __future__ import annotations

import json
import logging

from netswitch.core.i18n import Translator
from netswitch.core.logging import configure_logging


def test_missing_catalog_falls_back_to_source_strings(tmp_path):
    t = Translator("wp-multinetwork-switcher", languages_dir=str(tmp_path), locale="de_DE")
    assert t.gettext("Network Overview") == "Network Overview"
    assert t.ngettext("%d site", "%d sites", 1) == "%d site"
    assert t.ngettext("%d site", "%d sites", 3) == "%d sites"


def test_json_logging(capsys):
    configure_logging("DEBUG", json=True)
    try:
        logging.getLogger("netswitch.test").info("switched to %s", "b.example.com")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["message"] == "switched to b.example.com"
        assert record["levelname"] == "INFO"
        assert record["name"] == "netswitch.test"
    finally:
        configure_logging("INFO", json=False)
