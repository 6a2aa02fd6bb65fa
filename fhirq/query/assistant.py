"""
QueryAssistant ties the classifier, suggestion engine and edit applier to a
registry and a metadata store.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fhirq.metadata import CapabilitySnapshot, MetadataStore
from fhirq.models import ApplyResult, ParsedQuery, Suggestion
from fhirq.query.applier import EditApplier
from fhirq.query.classifier import QueryClassifier
from fhirq.query.suggestions import SuggestionEngine
from fhirq.registry import TypeRegistry, fhir_version_from_capability

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 15


class QueryAssistant:
	"""Autocomplete for FHIR REST query strings."""

	def __init__(self, registry: Optional[TypeRegistry] = None, store: Optional[MetadataStore] = None,
				 limit: int = DEFAULT_LIMIT):
		self.store = store if store is not None else MetadataStore()
		self.limit = limit
		self._components = self._build(registry or TypeRegistry())

	def _build(self, registry: TypeRegistry) -> Tuple[QueryClassifier, SuggestionEngine, EditApplier]:
		classifier = QueryClassifier(registry, self.store)
		return classifier, SuggestionEngine(registry, self.store), EditApplier(classifier)

	@property
	def classifier(self) -> QueryClassifier:
		return self._components[0]

	@property
	def engine(self) -> SuggestionEngine:
		return self._components[1]

	@property
	def applier(self) -> EditApplier:
		return self._components[2]

	@property
	def registry(self) -> TypeRegistry:
		return self._components[0].registry

	def use_registry(self, registry: TypeRegistry):
		# Components are swapped together, never one at a time
		self._components = self._build(registry)
		logger.info(f"Using FHIR {registry.version} type registry")

	def set_metadata(self, snapshot: Optional[CapabilitySnapshot]):
		"""
		Swap in a new capability snapshot (or None to clear it). When the
		server declares a FHIR version, the registry follows it.
		"""
		self.store.replace(snapshot)
		if snapshot is None:
			return
		version = fhir_version_from_capability(snapshot.fhir_version)
		if version and version != self.registry.version:
			self.use_registry(TypeRegistry(version))

	def parse(self, query: str, cursor_position: Optional[int] = None) -> ParsedQuery:
		return self.classifier.classify(query, cursor_position)

	def suggest(self, parsed: ParsedQuery) -> List[Suggestion]:
		return self.engine.suggest(parsed)

	def apply(self, query: str, cursor_position: int, suggestion: Suggestion) -> ApplyResult:
		return self.applier.apply(query, cursor_position, suggestion)

	def complete(self, query: str, cursor_pos: Optional[int] = None) -> Tuple[ParsedQuery, List[Suggestion]]:
		"""Classify and suggest against the same registry."""
		classifier, engine, _ = self._components
		parsed = classifier.classify(query, cursor_pos)
		return parsed, engine.suggest(parsed)

	def get_suggestions(self, query: str, cursor_pos: Optional[int] = None,
						limit: Optional[int] = None) -> List[Dict[str, Any]]:
		"""
		Get autocomplete suggestions for the current query.
		
		:param query: The current query string
		:param cursor_pos: Position of the cursor (defaults to end)
		:param limit: Maximum number of suggestions (defaults to the assistant limit)
		:return: List of suggestion dictionaries
		"""
		_, suggestions = self.complete(query, cursor_pos)
		if limit is None:
			limit = self.limit
		return [s.to_dict() for s in suggestions[:limit]]
