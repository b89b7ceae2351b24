import argparse

import pytest

from listings_worker.core.config import Settings
from listings_worker.jobs import run_ingest


def _settings(**overrides):
    values = dict(google_api_key="gkey", anthropic_api_key="akey", database_url="postgres://", max_per_term=7)
    values.update(overrides)
    return Settings(**values)


class FakeOrchestrator:
    def __init__(self, records):
        self.records = records
        self.calls = []

    def ingest(self, search_terms, max_per_term, store=None):
        self.calls.append((search_terms, max_per_term, store))
        return self.records


class FakeStore:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.inserted = []

    def insert(self, record):
        self.inserted.append(record)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class Record:
    def __init__(self, name):
        self.name = name


def test_parse_terms():
    assert run_ingest.parse_terms(["plumber, bakery", " ", "florist,"]) == ["plumber", "bakery", "florist"]


@pytest.mark.parametrize("missing", ["google_api_key", "anthropic_api_key"])
def test_build_orchestrator_requires_keys(missing):
    with pytest.raises(RuntimeError):
        run_ingest.build_orchestrator(_settings(**{missing: ""}))


def test_build_orchestrator_wires_dependencies(monkeypatch):
    monkeypatch.setattr(run_ingest, "AnthropicTextGenerator", lambda key, model: ("generator", key, model))

    orchestrator = run_ingest.build_orchestrator(_settings(request_delay=0.1))

    assert orchestrator.municipality.name == "Fair Lawn"
    assert orchestrator.search_client.build_query("bakery") == "bakery in Fair Lawn, NJ"
    assert orchestrator.enricher.generator == ("generator", "akey", _settings().anthropic_model)
    assert orchestrator.limiter.delay == 0.1
    assert orchestrator.categorizer.categorize("bakery") == "Food & Dining"


def test_run_ingest_job_requires_terms(monkeypatch):
    monkeypatch.setattr(run_ingest, "get_settings", lambda: _settings())
    with pytest.raises(ValueError):
        run_ingest.run_ingest_job(search_terms=[])


def test_run_ingest_job_saves_records(monkeypatch):
    records = [Record("a"), Record("b"), Record("c")]
    orchestrator = FakeOrchestrator(records)
    store = FakeStore([True, False, RuntimeError("constraint")])
    monkeypatch.setattr(run_ingest, "get_settings", lambda: _settings())
    monkeypatch.setattr(run_ingest, "build_orchestrator", lambda settings: orchestrator)
    monkeypatch.setattr(run_ingest, "init_pool", lambda: None)
    monkeypatch.setattr(run_ingest, "PostgresBusinessStore", lambda: store)

    summary = run_ingest.run_ingest_job(search_terms=["bakery"])

    assert summary == {"records": 3, "saved": 1, "skipped": 1, "failed": 1}
    assert orchestrator.calls == [(["bakery"], 7, store)]
    assert store.inserted == records


def test_run_ingest_job_dry_run_skips_database(monkeypatch):
    orchestrator = FakeOrchestrator([Record("a")])
    monkeypatch.setattr(run_ingest, "get_settings", lambda: _settings())
    monkeypatch.setattr(run_ingest, "build_orchestrator", lambda settings: orchestrator)

    def fail_pool():
        raise AssertionError("database should not be touched")

    monkeypatch.setattr(run_ingest, "init_pool", fail_pool)

    summary = run_ingest.run_ingest_job(search_terms=["bakery"], max_per_term=3, dry_run=True)

    assert summary["records"] == 1
    assert summary["saved"] == 0
    assert orchestrator.calls == [(["bakery"], 3, None)]


def test_build_parser_defaults(monkeypatch):
    monkeypatch.setattr(run_ingest, "get_settings", lambda: _settings(max_per_term=11))
    parser = run_ingest.build_parser()
    args = parser.parse_args(["--terms", "plumber,bakery", "--terms", "florist"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert run_ingest.parse_terms(args.terms) == ["plumber", "bakery", "florist"]
    assert args.max_per_term == 11
    assert args.dry_run is False
