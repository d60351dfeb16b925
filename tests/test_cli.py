"""Tests for the command-line entry point."""

import os

import pytest

from axiomtui import cli


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("AXIOM_TOKEN", "AXIOM_ORG_ID", "AXIOM_URL", "AXIOMTUI_LOG_FILE"):
        # setenv first so teardown restores the original state even if
        # load_dotenv writes to os.environ directly
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadDotenv:
    def test_loads_values(self, clean_env, monkeypatch):
        env_file = clean_env / ".env"
        env_file.write_text(
            "# comment\n"
            "\n"
            "AXIOM_TOKEN=xaat-abc\n"
            "export AXIOM_ORG_ID='acme'\n"
            "AXIOM_URL=https://x.example.com/?a=b\n"
            "garbage line\n"
        )
        cli.load_dotenv([env_file])
        assert os.environ["AXIOM_TOKEN"] == "xaat-abc"
        assert os.environ["AXIOM_ORG_ID"] == "acme"
        assert os.environ["AXIOM_URL"] == "https://x.example.com/?a=b"

    def test_existing_variables_win(self, clean_env, monkeypatch):
        monkeypatch.setenv("AXIOM_TOKEN", "from-env")
        env_file = clean_env / ".env"
        env_file.write_text("AXIOM_TOKEN=from-file\n")
        cli.load_dotenv([env_file])
        assert os.environ["AXIOM_TOKEN"] == "from-env"

    def test_missing_file_is_skipped(self, clean_env):
        cli.load_dotenv([clean_env / "nope.env"])


class TestParser:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.refresh == 5
        assert args.query == ""
        assert args.log_file is None

    def test_refresh_minimum(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.build_parser().parse_args(["--refresh", "1"])
        assert excinfo.value.code == 2

    def test_build_model_prefills_query(self):
        args = cli.build_parser().parse_args(["--query", "count()", "--refresh", "9"])
        model = cli.build_model(args)
        assert model.text.value == "count()"
        assert model.refresh_seconds == 9


class TestMain:
    def test_missing_token_exits_1(self, clean_env, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 1
        assert "AXIOM_TOKEN" in capsys.readouterr().err

    def test_runs_tui_and_exits_0(self, clean_env, monkeypatch):
        monkeypatch.setenv("AXIOM_TOKEN", "xaat-abc")
        calls = []
        monkeypatch.setattr(cli.curses, "wrapper", lambda fn, *args: calls.append((fn, args)))

        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--query", "count()"])

        assert excinfo.value.code == 0
        fn, args = calls[0]
        assert fn is cli.run_app
        controller = args[0]
        assert controller.model.text.value == "count()"

    def test_log_file(self, clean_env, monkeypatch):
        monkeypatch.setenv("AXIOM_TOKEN", "xaat-abc")
        monkeypatch.setattr(cli.curses, "wrapper", lambda fn, *args: None)
        log_path = clean_env / "logs" / "tui.log"

        with pytest.raises(SystemExit):
            cli.main(["--log-file", str(log_path)])

        text = log_path.read_text()
        assert "starting axiomtui" in text
        assert "xaat-abc" not in text
