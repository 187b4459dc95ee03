"""CLI parser and handler tests (no network: HTTP goes through a mock transport)."""
from __future__ import annotations

import asyncio
import io
import json

import pytest

from llm_playground.base.models import ProviderFamily
from llm_playground.config.settings import APIKey, AppSettings, save_settings, settings_path
from llm_playground.service.cli import build_parser, main
from llm_playground.service.cli.cli_actions import EXIT_FAILED, EXIT_OK, EXIT_USAGE, run_chat, title_for


def test_parser_shapes():
    p = build_parser()
    args = p.parse_args(["chat", "--provider", "google", "--model", "gemini-x", "hello", "there"])
    assert args.provider is ProviderFamily.GEMINI and args.prompt == ["hello", "there"]  # nosec B101
    assert p.parse_args(["history"]).limit == 20  # nosec B101
    assert p.parse_args(["show", "abc"]).conversation_id == "abc"  # nosec B101
    assert p.parse_args(["config", "path"]).action == "path"  # nosec B101


def test_parser_rejects_bad_values():
    p = build_parser()
    with pytest.raises(SystemExit):
        p.parse_args(["chat", "--provider", "cohere", "hi"])
    with pytest.raises(SystemExit):
        p.parse_args(["history", "--limit", "0"])
    with pytest.raises(SystemExit):
        p.parse_args(["chat", "--conversation", "c", "--provider", "openai", "hi"])


def test_title_for():
    assert title_for("  ") == "New chat"  # nosec B101
    assert title_for("short question\nsecond line") == "short question"  # nosec B101
    assert len(title_for("x" * 200)) == 48  # nosec B101


def _chat(tmp_path, fake, argv):
    args = build_parser().parse_args(["chat", "--db", str(tmp_path / "h.db")] + argv)
    out = io.StringIO()

    async def go():
        async with fake.client() as client:
            return await run_chat(args, client=client, out=out)

    return asyncio.run(go()), out.getvalue()


def test_chat_streams_reply_and_history_lists_it(tmp_path, monkeypatch, capsys, sse, streaming_client, chunk):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    fake = streaming_client([sse(json.dumps(chunk("Hi")), json.dumps(chunk("!", "stop")), "[DONE]")])
    code, out = _chat(tmp_path, fake, ["--provider", "openai", "--model", "gpt-x", "say", "hi"])
    assert code == EXIT_OK and out == "Hi!\n"  # nosec B101
    assert fake.requests[0].headers["authorization"] == "Bearer sk-live"  # nosec B101

    db = str(tmp_path / "h.db")
    assert main(["history", "--db", db, "--json"]) == EXIT_OK  # nosec B101
    rows = json.loads(capsys.readouterr().out)
    assert len(rows) == 1 and rows[0]["title"] == "say hi" and rows[0]["model"] == "gpt-x"  # nosec B101

    assert main(["show", rows[0]["id"], "--db", db]) == EXIT_OK  # nosec B101
    assert capsys.readouterr().out.splitlines() == ["user: say hi", "assistant: Hi!"]  # nosec B101


def test_chat_uses_key_from_settings(tmp_path, sse, streaming_client, chunk):
    save_settings(AppSettings(api_keys=[APIKey(name="main", key="ak-file", provider="anthropic")], api_key=0))
    body = sse(
        ("content_block_delta", {"type": "content_block_delta", "delta": {"text": "yo"}}),
        ("message_stop", {"type": "message_stop"}),
    )
    fake = streaming_client([body])
    code, out = _chat(tmp_path, fake, ["hey"])
    assert code == EXIT_OK and out == "yo\n"  # nosec B101
    assert fake.requests[0].headers["x-api-key"] == "ak-file"  # nosec B101


def test_chat_without_credentials_is_a_usage_error(tmp_path, capsys, streaming_client):
    code, _ = _chat(tmp_path, streaming_client(), ["--provider", "anthropic", "hi"])
    assert code == EXIT_USAGE  # nosec B101
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "config" and err["provider"] == "anthropic"  # nosec B101


def test_chat_failure_reports_error_json(tmp_path, monkeypatch, capsys, streaming_client):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    fake = streaming_client(status=429, body=b'{"error": {"message": "Rate limit reached"}}')
    code, _ = _chat(tmp_path, fake, ["--provider", "openai", "hi"])
    assert code == EXIT_FAILED  # nosec B101
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["status"] == "failed" and err["code"] == "rate_limit"  # nosec B101


def test_show_unknown_conversation(tmp_path, capsys):
    assert main(["show", "missing", "--db", str(tmp_path / "h.db")]) == EXIT_USAGE  # nosec B101
    assert json.loads(capsys.readouterr().err)["error"] == "not_found"  # nosec B101


def test_config_actions(capsys):
    assert main(["config", "path"]) == EXIT_OK  # nosec B101
    assert capsys.readouterr().out.strip() == str(settings_path())  # nosec B101
    assert not settings_path().exists()  # nosec B101

    assert main(["config", "init"]) == EXIT_OK  # nosec B101
    assert settings_path().exists()  # nosec B101
    capsys.readouterr()

    save_settings(AppSettings(api_keys=[APIKey(name="k", key="sk-secret")]))
    assert main(["config", "show"]) == EXIT_OK  # nosec B101
    shown = capsys.readouterr().out
    assert "sk-secret" not in shown and json.loads(shown)["api_keys"][0]["key"] == "***"  # nosec B101


def test_bare_prompt_defaults_to_chat(monkeypatch):
    seen = {}

    def fake_chat(args):
        seen["prompt"] = args.prompt
        return 0

    monkeypatch.setattr("llm_playground.service.cli.handle_chat", fake_chat)
    assert main(["what", "is", "sse"]) == 0  # nosec B101
    assert seen["prompt"] == ["what", "is", "sse"]  # nosec B101
