"""
FHIR Query Context Classifier

Maps (query text, cursor offset) to a ParsedQuery describing what kind of
token is being typed under the cursor. Classification never fails: text the
grammar does not recognise is classified as UNKNOWN.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from fhirq.metadata import CapabilitySnapshot, MetadataStore
from fhirq.models import ParsedQuery, QueryContext
from fhirq.registry import TypeRegistry

logger = logging.getLogger(__name__)


PARAM_NAME = r"[a-zA-Z_][a-zA-Z0-9_.-]*"

# Whole-query scans
RESOURCE_TYPE_RE = re.compile(r"^/([A-Za-z]*)")
USED_PARAM_RE = re.compile(rf"[?&]({PARAM_NAME})(?::[a-zA-Z]+)?=")
INCLUDE_RE = re.compile(r"[?&]_include=([^&]*)")
REVINCLUDE_RE = re.compile(r"[?&]_revinclude=([^&]*)")

# Text-before-cursor matchers
RESOURCE_PATH_RE = re.compile(r"^/([A-Za-z]*)$")
OPERATION_RE = re.compile(r"^/([A-Z][a-zA-Z]+)/([^/?]+)/([_$][a-zA-Z]*)?$")
CHAINED_RE = re.compile(rf"[?&]({PARAM_NAME}):([A-Z][a-zA-Z]+)\.([a-zA-Z]*)$")
MODIFIER_RE = re.compile(rf"[?&]({PARAM_NAME}):([a-zA-Z]*)$")
VALUE_RE = re.compile(rf"[?&]({PARAM_NAME})(?::([a-zA-Z]+))?=([^&]*)$")
PARAM_RE = re.compile(rf"[?&]({PARAM_NAME})?$")

Match = Optional[Dict[str, Any]]


def split_values(value_text: str) -> List[str]:
	"""Comma-separated include values, trimmed, empties dropped."""
	return [v.strip() for v in value_text.split(',') if v.strip()]


def last_segment(value_text: str) -> str:
	"""The value being typed in a comma-separated list."""
	comma = value_text.rfind(',')
	return value_text[comma + 1:].strip() if comma >= 0 else value_text


def resolve_param_type(registry: TypeRegistry, snapshot: Optional[CapabilitySnapshot],
					   resource_type: Optional[str], param_name: Optional[str]) -> Optional[str]:
	"""Type of a search parameter: global parameters first, then server metadata."""
	if not param_name:
		return None
	
	global_param = registry.global_parameter(param_name)
	if global_param:
		return global_param.type
	
	if resource_type and snapshot is not None:
		param = snapshot.search_parameter(resource_type, param_name)
		if param:
			return param.type
	
	return None


class QueryClassifier:
	"""Determines the autocomplete context at a cursor position."""

	def __init__(self, registry: TypeRegistry, store: Optional[MetadataStore] = None):
		self.registry = registry
		self.store = store

		# Evaluated top to bottom, first match wins. Chained parameters are
		# checked before modifiers because `subject:Patient.` would also
		# match the modifier pattern up to the colon.
		self._matchers: List[Callable[..., Match]] = [
			self._match_resource_path,
			self._match_operation,
			self._match_chained_parameter,
			self._match_modifier,
			self._match_value,
			self._match_parameter_name,
		]

	def classify(self, query: str, cursor_position: Optional[int] = None) -> ParsedQuery:
		"""
		Classify the token under the cursor.

		:param query: The full query text
		:param cursor_position: Caret offset (defaults to end of text)
		:return: ParsedQuery for this exact text and cursor
		"""
		query = query or ""
		if cursor_position is None:
			cursor_position = len(query)
		
		if not query:
			return ParsedQuery(query=query, cursor_position=cursor_position,
							   context=QueryContext.RESOURCE_TYPE)
		
		snapshot = self.store.snapshot if self.store else None
		fields = self._scan_query(query)
		
		text_before = query[:min(max(cursor_position, 0), len(query))]
		for matcher in self._matchers:
			match = matcher(text_before, fields, snapshot)
			if match is not None:
				fields.update(match)
				break
		
		parsed = ParsedQuery(query=query, cursor_position=cursor_position, **fields)
		logger.debug(f"Classified {query!r}@{cursor_position} as {parsed.context.label} (prefix={parsed.prefix!r})")
		return parsed

	def _scan_query(self, query: str) -> Dict[str, Any]:
		"""Facts taken from the whole query, independent of the cursor."""
		resource_match = RESOURCE_TYPE_RE.match(query)
		
		used_includes = []
		for match in INCLUDE_RE.finditer(query):
			used_includes.extend(split_values(match.group(1)))
		
		used_rev_includes = []
		for match in REVINCLUDE_RE.finditer(query):
			used_rev_includes.extend(split_values(match.group(1)))
		
		return {
			"resource_type": (resource_match.group(1) or None) if resource_match else None,
			"used_params": tuple(m.group(1) for m in USED_PARAM_RE.finditer(query)),
			"used_include_values": tuple(used_includes),
			"used_rev_include_values": tuple(used_rev_includes),
		}

	# ============ Matchers ============

	def _match_resource_path(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""/Pat"""
		match = RESOURCE_PATH_RE.match(text)
		if not match:
			return None
		return {"context": QueryContext.RESOURCE_TYPE, "prefix": match.group(1)}

	def _match_operation(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""/Patient/123/_hist"""
		match = OPERATION_RE.match(text)
		if not match:
			return None
		return {
			"context": QueryContext.RESOURCE_OPERATION,
			"resource_type": match.group(1),
			"prefix": match.group(3) or ""
		}

	def _match_chained_parameter(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""?subject:Patient.iden"""
		match = CHAINED_RE.search(text)
		if not match:
			return None
		return {
			"context": QueryContext.CHAINED_PARAMETER,
			"current_param": match.group(1),
			"chained_resource_type": match.group(2),
			"prefix": match.group(3)
		}

	def _match_modifier(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""?name:ex"""
		match = MODIFIER_RE.search(text)
		if not match:
			return None
		return {
			"context": QueryContext.MODIFIER,
			"current_param": match.group(1),
			"prefix": match.group(2)
		}

	def _match_value(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""?name=Al, ?_include=Patient:organization,Pat"""
		match = VALUE_RE.search(text)
		if not match:
			return None
		
		param_name = match.group(1)
		value_text = match.group(3)
		
		if param_name == "_include":
			return {"context": QueryContext.INCLUDE_VALUE, "current_param": param_name,
					"prefix": last_segment(value_text)}
		
		if param_name == "_revinclude":
			return {"context": QueryContext.REVINCLUDE_VALUE, "current_param": param_name,
					"prefix": last_segment(value_text)}
		
		return {
			"context": QueryContext.PARAMETER_VALUE,
			"current_param": param_name,
			"current_param_type": resolve_param_type(self.registry, snapshot, fields["resource_type"], param_name),
			"prefix": value_text
		}

	def _match_parameter_name(self, text: str, fields: Dict[str, Any], snapshot) -> Match:
		"""?na or &na"""
		match = PARAM_RE.search(text)
		if not match:
			return None
		return {"context": QueryContext.PARAMETER_NAME, "prefix": match.group(1) or ""}
