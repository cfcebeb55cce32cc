import pytest

from memkv import cli
from memkv.result import Failure, Success

from conftest import canned


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("MEMKV_HOST", "MEMKV_TIMEOUT", "MEMKV_MAX_BODY_BYTES"):
        monkeypatch.delenv(name, raising=False)


def test_parse_args_put():
    args = cli.parse_args(["--host", "http://h:1", "put", "k", "v"])
    assert args.command == "put"
    assert (args.host, args.key, args.value) == ("http://h:1", "k", "v")


def test_parse_args_requires_command():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_print_result(capsys):
    assert cli.print_result(Success("body")) is True
    assert cli.print_result(Failure("nope")) is False

    out, err = capsys.readouterr()
    assert out == "Success! Result: body\n"
    assert err == "Error: nope\n"


def test_main_get_success(server_factory, capsys):
    with server_factory("tcp", canned(b"stored")) as details:
        assert cli.main(["--host", details.base_url, "get", "k"]) == 0
        captured = details.requests.get(timeout=1.0)

    assert captured.startswith(b"GET /k HTTP/1.1")
    assert capsys.readouterr().out == "Success! Result: stored\n"


def test_main_list_with_prefix_uses_env_host(server_factory, monkeypatch):
    with server_factory("tcp", canned(b"[]")) as details:
        monkeypatch.setenv("MEMKV_HOST", details.base_url)
        assert cli.main(["list", "--prefix", "c"]) == 0
        captured = details.requests.get(timeout=1.0)

    assert captured.startswith(b"GET /keys/c HTTP/1.1")


def test_main_reports_failure(closed_port, capsys):
    assert cli.main(["--host", f"http://127.0.0.1:{closed_port}", "delete-all"]) == 1
    assert capsys.readouterr().err.endswith("Error: Couldn't connect to server\n")


def test_main_rejects_bad_env(monkeypatch, capsys):
    monkeypatch.setenv("MEMKV_TIMEOUT", "never")
    assert cli.main(["ping"]) == 2
    assert "Invalid memkv environment setting" in capsys.readouterr().err


def test_demo_runs_every_step(server_factory, capsys):
    with server_factory("tcp", canned(b"ok")) as details:
        assert cli.main(["--host", details.base_url, "demo"]) == 0

        request_lines = []
        while not details.requests.empty():
            request_lines.append(details.requests.get().split(b"\r\n")[0])

    assert len(request_lines) == 12
    assert request_lines[0] == b"PUT /py_sdk HTTP/1.1"
    assert request_lines[-1] == b"GET /keys HTTP/1.1"
    assert capsys.readouterr().out.count("Success! Result: ok") == 12


@pytest.mark.parametrize("timeout", ["0", "-1"])
def test_main_rejects_non_positive_timeout(timeout, capsys):
    assert cli.main(["--timeout", timeout, "ping"]) == 2
    assert "Timeout must be positive" in capsys.readouterr().err
