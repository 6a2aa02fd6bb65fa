"""
FHIR Query Suggestion Engine

Turns a ParsedQuery into an ordered list of suggestions using the type
registry and, when loaded, the server's capability metadata.
"""

import logging
from typing import Iterable, List, Optional

from fhirq.metadata import CapabilitySnapshot, MetadataStore
from fhirq.models import REFERENCE_TYPE, ParsedQuery, QueryContext, Suggestion, SuggestionCategory
from fhirq.query.classifier import resolve_param_type
from fhirq.registry import TypeRegistry

logger = logging.getLogger(__name__)

ORDINAL_TYPES = ("date", "number", "quantity")


def rank(suggestions: Iterable[Suggestion], prefix: str) -> List[Suggestion]:
	"""Exact (case-insensitive) label match first, then lexical order."""
	lower_prefix = prefix.lower()
	return sorted(suggestions, key=lambda s: (s.label.lower() != lower_prefix, s.label.lower(), s.label))


class SuggestionEngine:
	"""Provides autocomplete suggestions for a classified query."""

	# Instance-level operations offered after /Type/id/
	OPERATIONS = [
		('_history', 'Get version history of this resource'),
		('$everything', 'Get all related resources (Patient/Encounter)'),
	]

	def __init__(self, registry: TypeRegistry, store: Optional[MetadataStore] = None):
		self.registry = registry
		self.store = store

	def suggest(self, parsed: ParsedQuery) -> List[Suggestion]:
		"""
		Get suggestions for the context recorded in `parsed`.
		Ordering of the returned list is deterministic.
		"""
		snapshot = self.store.snapshot if self.store else None
		context = parsed.context
		
		if context == QueryContext.RESOURCE_TYPE:
			return self._suggest_resource_types(parsed.prefix)
		
		elif context == QueryContext.RESOURCE_OPERATION:
			return self._suggest_operations(parsed.prefix)
		
		elif context == QueryContext.PARAMETER_NAME:
			return self._suggest_parameters(snapshot, parsed.resource_type, parsed.prefix, parsed.used_params)
		
		elif context == QueryContext.MODIFIER:
			return self._suggest_modifiers(snapshot, parsed.resource_type, parsed.current_param, parsed.prefix)
		
		elif context == QueryContext.PARAMETER_VALUE:
			return self._suggest_values(parsed.resource_type, parsed.current_param,
										parsed.current_param_type, parsed.prefix)
		
		elif context == QueryContext.INCLUDE_VALUE:
			return self._suggest_includes(snapshot, parsed.resource_type, parsed.prefix, parsed.used_include_values)
		
		elif context == QueryContext.REVINCLUDE_VALUE:
			return self._suggest_rev_includes(snapshot, parsed.resource_type, parsed.prefix,
											  parsed.used_rev_include_values)
		
		elif context == QueryContext.CHAINED_PARAMETER:
			return self._suggest_chained_parameters(snapshot, parsed.chained_resource_type, parsed.prefix,
												   parsed.used_params)
		
		return []

	def _suggest_resource_types(self, prefix: str) -> List[Suggestion]:
		return [
			Suggestion(
				label=resource_type,
				insert_text=resource_type,
				category=SuggestionCategory.RESOURCE,
				description=f"FHIR {resource_type} resource"
			)
			for resource_type in self.registry.search_resource_types(prefix)
		]

	def _suggest_operations(self, prefix: str) -> List[Suggestion]:
		lower_prefix = prefix.lower()
		return [
			Suggestion(label=name, insert_text=name, category=SuggestionCategory.GLOBAL, description=desc)
			for name, desc in self.OPERATIONS
			if name.lower().startswith(lower_prefix)
		]

	def _suggest_parameters(self, snapshot: Optional[CapabilitySnapshot], resource_type: Optional[str],
							prefix: str, used_params: Iterable[str]) -> List[Suggestion]:
		used = set(used_params)
		offered = set()
		suggestions = []
		
		for param in self.registry.search_global_parameters(prefix):
			if param.name in used:
				continue
			offered.add(param.name)
			suggestions.append(Suggestion(
				label=param.name,
				insert_text=param.name + '=',
				category=SuggestionCategory.GLOBAL,
				description=param.description,
				param_type=param.type
			))
		
		# Resource-specific parameters need loaded metadata
		if resource_type and snapshot is not None:
			lower_prefix = prefix.lower()
			for param in snapshot.search_parameters(resource_type) or []:
				if param.name in used or param.name in offered:
					continue
				if not param.name.lower().startswith(lower_prefix):
					continue
				offered.add(param.name)
				suggestions.append(Suggestion(
					label=param.name,
					insert_text=param.name + '=',
					category=SuggestionCategory.PARAMETER,
					description=param.documentation or f"Search by {param.name}",
					param_type=param.type
				))
		
		return rank(suggestions, prefix)

	def _suggest_modifiers(self, snapshot: Optional[CapabilitySnapshot], resource_type: Optional[str],
						   param_name: Optional[str], prefix: str) -> List[Suggestion]:
		if not param_name:
			return []
		
		param_type = resolve_param_type(self.registry, snapshot, resource_type, param_name) or "string"
		lower_prefix = prefix.lower()
		suggestions = []
		
		for modifier in self.registry.modifiers(param_type):
			if modifier.lower().startswith(lower_prefix):
				suggestions.append(Suggestion(
					label=modifier,
					insert_text=modifier,
					category=SuggestionCategory.MODIFIER,
					description=f"{param_type} modifier"
				))
		
		# Reference parameters can also chain into a target resource type
		if param_type == "reference":
			for target in self.registry.reference_targets(param_name):
				if target.lower().startswith(lower_prefix):
					suggestions.append(Suggestion(
						label=target,
						insert_text=target,
						category=SuggestionCategory.MODIFIER,
						description=f"Chain to {target}",
						param_type=REFERENCE_TYPE
					))
		
		return suggestions

	def _suggest_values(self, resource_type: Optional[str], param_name: Optional[str],
						param_type: Optional[str], prefix: str) -> List[Suggestion]:
		lower_prefix = prefix.lower()
		suggestions = []
		
		if param_type in ORDINAL_TYPES:
			for op in self.registry.prefix_operators():
				if op.prefix.startswith(lower_prefix):
					suggestions.append(Suggestion(
						label=op.prefix,
						insert_text=op.prefix,
						category=SuggestionCategory.OPERATOR,
						description=op.description
					))
		
		if param_name:
			enum_values = None
			if resource_type:
				enum_values = self.registry.enum_values(f"{resource_type}.{param_name}")
			if enum_values is None:
				enum_values = self.registry.enum_values(param_name)
			
			for value in enum_values or []:
				if value.lower().startswith(lower_prefix):
					suggestions.append(Suggestion(
						label=value,
						insert_text=value,
						category=SuggestionCategory.VALUE,
						description=f"{param_name} value"
					))
		
		return suggestions

	def _suggest_includes(self, snapshot: Optional[CapabilitySnapshot], resource_type: Optional[str],
						  prefix: str, used_values: Iterable[str]) -> List[Suggestion]:
		if not resource_type or snapshot is None:
			return []
		
		used = set(used_values)
		lower_prefix = prefix.lower()
		values = sorted(v for v in snapshot.include_paths(resource_type)
						if v not in used and v.lower().startswith(lower_prefix))
		
		suggestions = []
		for value in values:
			parts = value.split(':')
			target = parts[1] if len(parts) > 1 and parts[1] else value
			suggestions.append(Suggestion(
				label=value,
				insert_text=value,
				category=SuggestionCategory.INCLUDE,
				description=f"Include {target} reference"
			))
		return suggestions

	def _suggest_rev_includes(self, snapshot: Optional[CapabilitySnapshot], resource_type: Optional[str],
							  prefix: str, used_values: Iterable[str]) -> List[Suggestion]:
		if not resource_type or snapshot is None:
			return []
		
		used = set(used_values)
		lower_prefix = prefix.lower()
		values = sorted(v for v in snapshot.rev_include_paths(resource_type)
						if v not in used and v.lower().startswith(lower_prefix))
		
		return [
			Suggestion(
				label=value,
				insert_text=value,
				category=SuggestionCategory.INCLUDE,
				description=f"Reverse include from {value.split(':')[0] or value}"
			)
			for value in values
		]

	def _suggest_chained_parameters(self, snapshot: Optional[CapabilitySnapshot],
									chained_resource_type: Optional[str], prefix: str,
									used_params: Iterable[str] = ()) -> List[Suggestion]:
		if not chained_resource_type or snapshot is None:
			return []
		
		used = set(used_params)
		lower_prefix = prefix.lower()
		suggestions = [
			Suggestion(
				label=param.name,
				insert_text=param.name + '=',
				category=SuggestionCategory.PARAMETER,
				description=f"{chained_resource_type} search parameter",
				param_type=param.type
			)
			for param in snapshot.search_parameters(chained_resource_type) or []
			if param.name.lower().startswith(lower_prefix) and param.name not in used
		]
		return rank(suggestions, prefix)
