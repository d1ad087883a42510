import json

import speechsearch.cli as cli
from speechsearch.core import InvalidIntervalError, SummaryResult


class StubService:
    def __init__(self):
        self.calls = []

    async def summary(self, options):
        self.calls.append(("summary", options))
        if options.interval == "week":
            raise InvalidIntervalError(options.interval)
        return SummaryResult(total=3)

    async def get_context(self, transcript_id, start, end):
        self.calls.append(("context", transcript_id, start, end))
        return [{"order": start}]

    def export_tsv(self, options):
        async def _chunks():
            yield b"transcript\torder\n"
            yield b"T1\t1\n"

        return _chunks()


class StubResources:
    def __init__(self, service):
        self.service = service
        self.closed = False

    async def aclose(self):
        self.closed = True


def install(monkeypatch):
    service = StubService()
    resources = StubResources(service)
    monkeypatch.setattr(cli, "create_service", lambda config: resources)
    monkeypatch.setenv("SPEECHSEARCH_INDEX_BASE_URL", "http://index.invalid:9200")
    return service, resources


def test_summary_command_prints_json(monkeypatch, capsys):
    service, resources = install(monkeypatch)

    assert cli.main(["summary", "--query", "olje", "--interval", "year"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["counts"] == {"total": 3}
    assert service.calls[0][1].interval == "year"
    assert resources.closed


def test_invalid_interval_returns_error_code(monkeypatch):
    install(monkeypatch)

    assert cli.main(["summary", "--query", "olje", "--interval", "week"]) == 1


def test_context_command(monkeypatch, capsys):
    service, _ = install(monkeypatch)

    assert cli.main(["context", "--transcript", "T1", "--from-order", "3", "--to-order", "5"]) == 0

    assert json.loads(capsys.readouterr().out) == [{"order": 3}]
    assert service.calls == [("context", "T1", 3, 5)]


def test_export_command_writes_file(monkeypatch, tmp_path):
    install(monkeypatch)
    target = tmp_path / "export.tsv"

    assert cli.main(["export", "--query", "olje", "--output", str(target)]) == 0

    assert target.read_bytes() == b"transcript\torder\nT1\t1\n"


def test_negative_size_returns_error_code(monkeypatch):
    service, resources = install(monkeypatch)

    assert cli.main(["hits", "--query", "olje", "--size", "-1"]) == 1
    assert service.calls == []


def test_config_command_writes_effective_configuration(monkeypatch, tmp_path):
    install(monkeypatch)
    target = tmp_path / "speechsearch.json"

    assert cli.main(["config", "--config", str(target)]) == 0

    data = json.loads(target.read_text(encoding="utf8"))
    assert data["index"]["base_url"] == "http://index.invalid:9200"
    assert data["cache"]["max_entries"] == 500
