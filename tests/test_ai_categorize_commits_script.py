"""Tests for scripts/ai_categorize_commits.py."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import select

from gitinsight.llm.client import CommitCategorizationClient
from gitinsight.llm.provider import LLMConfigurationError, LLMProvider
from gitinsight.models import Commit

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "ai_categorize_commits.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("ai_categorize_commits", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class ScriptedProvider(LLMProvider):
    name = "scripted"

    def __init__(self, responses):
        self.responses = list(responses)
        self.prompts: list[str] = []

    def complete(self, prompt, system_prompt=None, **kwargs):
        self.prompts.append(prompt)
        return self.responses.pop(0)


def _client(*responses) -> CommitCategorizationClient:
    return CommitCategorizationClient(ScriptedProvider(responses), timeout=5, retries=1, sleep=lambda _: None)


@pytest.fixture
def exports_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("EXPORTS_DIR", str(tmp_path))
    export = {"commits": [{"hash": "abc123", "files": [{"filename": "app/billing/invoice.rb"}]}]}
    (tmp_path / "mater.json").write_text(json.dumps(export), encoding="utf-8")
    return tmp_path


# ── Argument parsing ─────────────────────────────────────────────────


class TestParseArgs:
    def test_defaults(self, script):
        args = script.parse_args([])
        assert (args.dry_run, args.force, args.repo, args.limit, args.batch_size, args.debug) == (
            False,
            False,
            None,
            None,
            50,
            False,
        )

    def test_all_flags(self, script):
        args = script.parse_args(
            ["--dry-run", "--force", "--repo", "mater", "--limit", "10", "--batch-size", "5", "--debug"]
        )
        assert (args.dry_run, args.force, args.repo, args.limit, args.batch_size, args.debug) == (
            True,
            True,
            "mater",
            10,
            5,
            True,
        )

    @pytest.mark.parametrize("argv", [["--batch-size", "0"], ["--batch-size", "-3"], ["--limit", "0"]])
    def test_rejects_non_positive(self, script, argv):
        with pytest.raises(SystemExit):
            script.parse_args(argv)


# ── Configuration check ──────────────────────────────────────────────


class TestCheckConfiguration:
    def test_disabled_without_provider(self, script, monkeypatch, caplog):
        monkeypatch.delenv("AI_PROVIDER", raising=False)
        assert script._check_configuration() is False
        assert "AI categorization is not enabled" in caplog.text

    def test_ollama_defaults_ok(self, script, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "ollama")
        monkeypatch.setenv("OLLAMA_URL", "http://localhost:11434")
        assert script._check_configuration() is True

    def test_missing_key_reported(self, script, monkeypatch, caplog):
        monkeypatch.setenv("AI_PROVIDER", "openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert script._check_configuration() is False
        assert "OPENAI_API_KEY environment variable is required" in caplog.text

    def test_main_stops_on_invalid_configuration(self, script, monkeypatch):
        monkeypatch.delenv("AI_PROVIDER", raising=False)
        with patch.object(script, "run") as mock_run:
            assert script.main([]) == 1
        mock_run.assert_not_called()


# ── run() ────────────────────────────────────────────────────────────


class TestRun:
    def test_categorizes_and_prints_summary(self, script, db, repository, make_commit, exports_dir, capsys):
        make_commit("abc123", "Fix invoice rounding")
        client = _client("CATEGORY: BILLING\nCONFIDENCE: 88\nREASON: invoices\n")

        with patch.object(script, "SessionLocal", return_value=db), patch.object(
            script, "get_llm_client", return_value=client
        ):
            assert script.run(script.parse_args([])) == 0

        row = db.scalars(select(Commit).where(Commit.hash == "abc123")).one()
        assert (row.category, row.ai_confidence) == ("BILLING", 88)
        assert "- app/billing/invoice.rb" in client.provider.prompts[0]
        out = capsys.readouterr().out
        assert "Successfully categorized: 1" in out
        assert "New categories created:   1" in out

    def test_dry_run_writes_nothing(self, script, db, repository, make_commit, exports_dir, capsys):
        make_commit("abc123", "Fix invoice rounding")
        client = _client("CATEGORY: BILLING\nCONFIDENCE: 88\nREASON: invoices\n")

        with patch.object(script, "SessionLocal", return_value=db), patch.object(
            script, "get_llm_client", return_value=client
        ):
            assert script.run(script.parse_args(["--dry-run"])) == 0

        assert db.scalars(select(Commit.category)).one() is None
        assert "abc123: BILLING (88%)" in capsys.readouterr().out

    def test_missing_export_skips_repository(self, script, db, repository, make_commit, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPORTS_DIR", str(tmp_path / "empty"))
        make_commit("abc123", "Fix invoice rounding")
        client = _client()

        with patch.object(script, "SessionLocal", return_value=db), patch.object(
            script, "get_llm_client", return_value=client
        ):
            assert script.run(script.parse_args([])) == 0
        assert client.provider.prompts == []

    def test_unknown_repository(self, script, db, repository, exports_dir):
        with patch.object(script, "SessionLocal", return_value=db), patch.object(
            script, "get_llm_client", return_value=_client()
        ):
            assert script.run(script.parse_args(["--repo", "ghost"])) == 1

    def test_configuration_error_exits_1(self, script, db):
        with patch.object(script, "SessionLocal", return_value=db), patch.object(
            script, "get_llm_client", side_effect=LLMConfigurationError("Failed to create openai client: no key")
        ):
            assert script.run(script.parse_args([])) == 1
