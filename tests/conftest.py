import logging

import pytest

from fhirq.metadata import CapabilitySnapshot, MetadataStore
from fhirq.query import QueryAssistant
from fhirq.registry import TypeRegistry


CAPABILITY_STATEMENT = {
	"resourceType": "CapabilityStatement",
	"fhirVersion": "3.0.2",
	"software": {"name": "Test FHIR Server"},
	"rest": [{
		"mode": "server",
		"resource": [
			{
				"type": "Patient",
				"searchParam": [
					{"name": "name", "type": "string", "documentation": "A portion of the name"},
					{"name": "gender", "type": "token"},
					{"name": "birthdate", "type": "date"},
					{"name": "general-practitioner", "type": "reference"},
					{"name": "identifier", "type": "token"},
					{"name": "_id", "type": "token"},
				],
				"searchInclude": ["Patient:organization", "Patient:general-practitioner", "Patient:link"],
				"searchRevInclude": ["Observation:subject", "Encounter:patient", "Condition:patient"],
			},
			{
				"type": "Observation",
				"searchParam": [
					{"name": "subject", "type": "reference"},
					{"name": "code", "type": "token"},
					{"name": "value-quantity", "type": "quantity"},
					{"name": "status", "type": "token"},
					{"name": "date", "type": "date"},
				],
				"searchInclude": ["Observation:subject", "Observation:performer"],
			},
			{
				"type": "Organization",
				"searchParam": [
					{"name": "name", "type": "string"},
					{"name": "Name", "type": "string"},
					{"name": "address", "type": "string"},
				],
			},
		],
	}],
}


@pytest.fixture
def capability_statement():
	return CAPABILITY_STATEMENT


@pytest.fixture
def snapshot():
	return CapabilitySnapshot.from_capability_statement(CAPABILITY_STATEMENT)


@pytest.fixture
def registry():
	return TypeRegistry("STU3")


@pytest.fixture
def store(snapshot):
	return MetadataStore(snapshot)


@pytest.fixture
def assistant(registry, store):
	return QueryAssistant(registry, store)


@pytest.fixture
def bare_assistant(registry):
	"""Assistant with no metadata loaded."""
	return QueryAssistant(registry, MetadataStore())


@pytest.fixture(autouse=True)
def restore_root_logger():
	root = logging.getLogger()
	handlers = list(root.handlers)
	level = root.level
	yield
	root.handlers[:] = handlers
	root.setLevel(level)
