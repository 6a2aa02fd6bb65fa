import pytest

from fhirq.models import QueryContext


def classify_at_end(assistant, query):
	return assistant.parse(query, len(query))


def test_empty_query_is_resource_type(assistant):
	parsed = assistant.parse("", 0)
	assert parsed.context == QueryContext.RESOURCE_TYPE
	assert parsed.prefix == ""
	assert parsed.used_params == ()


def test_slash_is_resource_type(assistant):
	parsed = assistant.parse("/", 1)
	assert parsed.context == QueryContext.RESOURCE_TYPE
	assert parsed.prefix == ""
	assert parsed.resource_type is None


def test_partial_resource_type(assistant):
	parsed = assistant.parse("/Pat", 4)
	assert parsed.context == QueryContext.RESOURCE_TYPE
	assert parsed.prefix == "Pat"


def test_resource_type_mid_path(assistant):
	# Cursor inside the path segment only looks at text before it
	parsed = assistant.parse("/Patient?name=x", 4)
	assert parsed.context == QueryContext.RESOURCE_TYPE
	assert parsed.prefix == "Pat"
	assert parsed.resource_type == "Patient"


def test_parameter_name_after_question_mark(assistant):
	parsed = assistant.parse("/Patient?", 9)
	assert parsed.context == QueryContext.PARAMETER_NAME
	assert parsed.resource_type == "Patient"
	assert parsed.prefix == ""


def test_parameter_name_after_ampersand(assistant):
	parsed = classify_at_end(assistant, "/Patient?name=Al&gen")
	assert parsed.context == QueryContext.PARAMETER_NAME
	assert parsed.prefix == "gen"


def test_parameter_value(assistant):
	parsed = assistant.parse("Patient?gender=", 15)
	assert parsed.context == QueryContext.PARAMETER_VALUE
	assert parsed.current_param == "gender"
	assert parsed.prefix == ""


def test_parameter_value_type_from_metadata(assistant):
	parsed = classify_at_end(assistant, "/Patient?birthdate=ge")
	assert parsed.context == QueryContext.PARAMETER_VALUE
	assert parsed.current_param_type == "date"
	assert parsed.prefix == "ge"


def test_parameter_value_type_prefers_global(assistant):
	# _count is not declared by the server, the global table supplies it
	parsed = classify_at_end(assistant, "/Patient?_count=")
	assert parsed.current_param_type == "number"


def test_parameter_value_with_modifier(assistant):
	parsed = classify_at_end(assistant, "/Patient?name:exact=Al")
	assert parsed.context == QueryContext.PARAMETER_VALUE
	assert parsed.current_param == "name"
	assert parsed.prefix == "Al"
	assert parsed.current_param_type == "string"


def test_parameter_value_type_unknown_without_metadata(bare_assistant):
	parsed = classify_at_end(bare_assistant, "/Patient?birthdate=")
	assert parsed.context == QueryContext.PARAMETER_VALUE
	assert parsed.current_param_type is None


def test_modifier(assistant):
	parsed = assistant.parse("Patient?name:", 13)
	assert parsed.context == QueryContext.MODIFIER
	assert parsed.current_param == "name"
	assert parsed.prefix == ""


def test_modifier_with_partial(assistant):
	parsed = classify_at_end(assistant, "/Patient?name:ex")
	assert parsed.context == QueryContext.MODIFIER
	assert parsed.prefix == "ex"
	# modifier context does not resolve a type
	assert parsed.current_param_type is None


@pytest.mark.parametrize("param,resource_type,partial", [
	("subject", "Patient", ""),
	("subject", "Patient", "iden"),
	("general-practitioner", "Practitioner", "na"),
	("patient", "Patient", "Name"),
])
def test_chained_parameter_wins_over_modifier(assistant, param, resource_type, partial):
	query = f"/Observation?code=x&{param}:{resource_type}.{partial}"
	parsed = classify_at_end(assistant, query)
	assert parsed.context == QueryContext.CHAINED_PARAMETER
	assert parsed.current_param == param
	assert parsed.chained_resource_type == resource_type
	assert parsed.prefix == partial


def test_include_value(assistant):
	parsed = classify_at_end(assistant, "/Patient?_include=Pat")
	assert parsed.context == QueryContext.INCLUDE_VALUE
	assert parsed.current_param == "_include"
	assert parsed.prefix == "Pat"


def test_include_value_after_comma(assistant):
	parsed = classify_at_end(assistant, "/Patient?_include=Patient:organization, Pat")
	assert parsed.context == QueryContext.INCLUDE_VALUE
	assert parsed.prefix == "Pat"
	assert parsed.used_include_values == ("Patient:organization", "Pat")


def test_revinclude_value(assistant):
	parsed = classify_at_end(assistant, "/Patient?_revinclude=Observation:subject,")
	assert parsed.context == QueryContext.REVINCLUDE_VALUE
	assert parsed.prefix == ""
	assert parsed.used_rev_include_values == ("Observation:subject",)


def test_resource_operation(assistant):
	parsed = classify_at_end(assistant, "/Patient/123/_hi")
	assert parsed.context == QueryContext.RESOURCE_OPERATION
	assert parsed.resource_type == "Patient"
	assert parsed.prefix == "_hi"


def test_resource_operation_empty_prefix(assistant):
	parsed = classify_at_end(assistant, "/Patient/abc-1/")
	assert parsed.context == QueryContext.RESOURCE_OPERATION
	assert parsed.prefix == ""


def test_resource_operation_dollar(assistant):
	parsed = classify_at_end(assistant, "/Patient/123/$ev")
	assert parsed.context == QueryContext.RESOURCE_OPERATION
	assert parsed.prefix == "$ev"


@pytest.mark.parametrize("query", [
	"Patient",
	"/Patient/",
	"/Patient/123",
	"/patient/123/",
	"http://example.org",
])
def test_unrecognised_text_is_unknown(assistant, query):
	assert classify_at_end(assistant, query).context == QueryContext.UNKNOWN


def test_used_params_cover_whole_query(assistant):
	parsed = assistant.parse("Patient?gender=male&name=", 25)
	assert "gender" in parsed.used_params
	assert "name" in parsed.used_params


def test_used_params_independent_of_cursor(assistant):
	query = "/Patient?gender=male&name=Al&_count=10"
	at_start = assistant.parse(query, 9)
	at_end = assistant.parse(query, len(query))
	assert at_start.used_params == at_end.used_params == ("gender", "name", "_count")


def test_used_params_keep_duplicates_and_modifiers(assistant):
	parsed = classify_at_end(assistant, "/Patient?name=a&name:exact=b&")
	assert parsed.used_params == ("name", "name")


def test_used_include_values_from_all_assignments(assistant):
	query = "/Patient?_include=Patient:organization&_include=Patient:link,&name="
	parsed = classify_at_end(assistant, query)
	assert parsed.used_include_values == ("Patient:organization", "Patient:link")


def test_cursor_beyond_text_is_clamped(assistant):
	parsed = assistant.parse("/Pat", 99)
	assert parsed.context == QueryContext.RESOURCE_TYPE
	assert parsed.prefix == "Pat"
	assert parsed.cursor_position == 99


def test_cursor_defaults_to_end(assistant):
	parsed = assistant.parse("/Patient?na")
	assert parsed.cursor_position == len("/Patient?na")
	assert parsed.prefix == "na"


def test_classification_is_repeatable(assistant):
	query = "/Observation?subject:Patient.na"
	assert assistant.parse(query, 20) == assistant.parse(query, 20)


def test_parsed_query_to_dict(assistant):
	data = assistant.parse("/Patient?name=", 14).to_dict()
	assert data["context"] == "parameter_value"
	assert data["used_params"] == ["name"]
	assert data["resource_type"] == "Patient"
