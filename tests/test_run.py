"""Tests for the launcher's pre-flight checks."""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config  # noqa: E402
import run  # noqa: E402


def test_check_requirements_passes_when_installed():
    assert run.check_requirements() is True


def test_check_requirements_lists_missing(monkeypatch, capsys):
    real_import = run.importlib.import_module

    def fake_import(name):
        if name == "reportlab":
            raise ImportError(name)
        return real_import(name)

    monkeypatch.setattr(run.importlib, "import_module", fake_import)
    assert run.check_requirements() is False
    assert "  - reportlab" in capsys.readouterr().out


def test_check_provider_keys(monkeypatch, capsys):
    for key in config.PROVIDER_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    assert run.check_provider_keys() is False

    monkeypatch.setenv("DEEPSEEK_API_KEY", "d-key")
    assert run.check_provider_keys() is True
    assert "Configured providers: deepseek" in capsys.readouterr().out
