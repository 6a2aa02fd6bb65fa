import json

import pytest
import requests

from fhirq import cli


def test_complete_prints_suggestions(capsys):
	assert cli.main(["--complete", "/Pat", "--cursor", "4"]) == 0
	data = json.loads(capsys.readouterr().out)
	assert data["context"] == "resource_type"
	assert data["suggestions"][0]["label"] == "Patient"


def test_complete_with_metadata_file(tmp_path, capsys, capability_statement):
	cache = tmp_path / "metadata.json"
	cache.write_text(json.dumps(capability_statement))
	assert cli.main(["--metadata-file", str(cache), "--complete", "/Patient?_include="]) == 0
	data = json.loads(capsys.readouterr().out)
	assert [s["label"] for s in data["suggestions"]] == [
		"Patient:general-practitioner", "Patient:link", "Patient:organization",
	]


def test_undecodable_metadata_file_degrades(tmp_path, capsys):
	cache = tmp_path / "metadata.json"
	cache.write_bytes(b'{"resourceType": "\xff\xfe"}')
	assert cli.main(["--metadata-file", str(cache), "--complete", "/Pat"]) == 0
	data = json.loads(capsys.readouterr().out)
	assert data["suggestions"][0]["label"] == "Patient"


def test_unreachable_server_degrades(monkeypatch, capsys):
	def refuse(self, url, **kwargs):
		raise requests.ConnectionError("refused")

	monkeypatch.setattr(requests.Session, "get", refuse)
	assert cli.main(["--base-url", "http://localhost:1/fhir", "--complete", "/Patient?_co"]) == 0
	data = json.loads(capsys.readouterr().out)
	assert [s["label"] for s in data["suggestions"]][-1] == "_count"


def test_config_file_and_overrides(tmp_path, capsys):
	path = tmp_path / "fhirq.json"
	path.write_text(json.dumps({"fhir_version": "R4", "max_suggestions": 2}))
	assert cli.main(["--config", str(path), "--complete", "/Body"]) == 0
	data = json.loads(capsys.readouterr().out)
	assert [s["label"] for s in data["suggestions"]] == ["BodyStructure"]
	assert cli.main(["--config", str(path), "--fhir-version", "STU3", "--complete", "/"]) == 0
	assert len(json.loads(capsys.readouterr().out)["suggestions"]) == 2


def test_invalid_config_exits(capsys):
	assert cli.main(["--fhir-version", "DSTU1", "--no-server"]) == 2


def test_no_server_returns(monkeypatch):
	def fail(*args, **kwargs):
		pytest.fail("server should not start")

	monkeypatch.setattr("fhirq_server.run_server", fail)
	assert cli.main(["--no-server"]) == 0


def test_starts_server(monkeypatch):
	started = {}

	def fake_run(config, assist_config, assistant, loader):
		started["port"] = config.port
		started["assistant"] = assistant

	monkeypatch.setattr("fhirq_server.run_server", fake_run)
	assert cli.main(["--port", "9000"]) == 0
	assert started["port"] == 9000
	assert started["assistant"].registry.version == "STU3"
