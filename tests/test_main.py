import main


def test_missing_key_exits_before_remote_calls(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.delenv("MCP_EXTENSION_KEY", raising=False)

    def boom(*args, **kwargs):
        raise AssertionError("remote service must not be created")

    monkeypatch.setattr("agent.foundry.FoundryAgentService", boom)

    assert main.main([]) == 1


def test_unhandled_exception_exits_non_zero(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setenv("MCP_EXTENSION_KEY", "k")

    def boom(*args, **kwargs):
        raise RuntimeError("no credentials")

    monkeypatch.setattr("agent.foundry.FoundryAgentService", boom)

    assert main.main(["--message", "hi"]) == 1
