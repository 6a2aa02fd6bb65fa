"""
Value types shared by the classifier, the suggestion engine and the
edit applier. All of them are immutable and compare structurally.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional, Tuple


class QueryContext(Enum):
	"""Grammatical category of the token under the cursor."""
	RESOURCE_TYPE = auto()       # /Pat
	RESOURCE_OPERATION = auto()  # /Patient/123/_hi
	PARAMETER_NAME = auto()      # ?na or &na
	MODIFIER = auto()            # name:ex
	PARAMETER_VALUE = auto()     # name=Al
	INCLUDE_VALUE = auto()       # _include=Patient:gen
	REVINCLUDE_VALUE = auto()    # _revinclude=Observation:sub
	CHAINED_PARAMETER = auto()   # subject:Patient.iden
	UNKNOWN = auto()

	@property
	def label(self) -> str:
		return self.name.lower()


class SuggestionCategory(Enum):
	RESOURCE = auto()
	PARAMETER = auto()
	MODIFIER = auto()
	OPERATOR = auto()
	VALUE = auto()
	GLOBAL = auto()
	INCLUDE = auto()

	@property
	def label(self) -> str:
		return self.name.lower()

	@classmethod
	def from_label(cls, label: str) -> 'SuggestionCategory':
		try:
			return cls[label.upper()]
		except KeyError:
			raise ValueError(f"Unknown suggestion category: {label!r}") from None


# Marks a modifier suggestion that names a chain target rather than a modifier
REFERENCE_TYPE = "reference-type"


@dataclass(frozen=True)
class ParsedQuery:
	"""Result of classifying a query at a cursor position."""
	query: str
	cursor_position: int
	context: QueryContext = QueryContext.UNKNOWN
	resource_type: Optional[str] = None
	current_param: Optional[str] = None
	current_param_type: Optional[str] = None
	prefix: str = ""
	# Computed over the whole query, not just the text before the cursor
	used_params: Tuple[str, ...] = ()
	used_include_values: Tuple[str, ...] = ()
	used_rev_include_values: Tuple[str, ...] = ()
	chained_resource_type: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"query": self.query,
			"cursor_position": self.cursor_position,
			"context": self.context.label,
			"resource_type": self.resource_type,
			"current_param": self.current_param,
			"current_param_type": self.current_param_type,
			"prefix": self.prefix,
			"used_params": list(self.used_params),
			"used_include_values": list(self.used_include_values),
			"used_rev_include_values": list(self.used_rev_include_values),
			"chained_resource_type": self.chained_resource_type
		}


@dataclass(frozen=True)
class Suggestion:
	"""A single autocomplete suggestion."""
	label: str
	insert_text: str
	category: SuggestionCategory
	description: Optional[str] = None
	param_type: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"label": self.label,
			"insert_text": self.insert_text,
			"category": self.category.label,
			"description": self.description,
			"param_type": self.param_type
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'Suggestion':
		"""
		Rebuild a suggestion sent back by a client.

		:raises ValueError: if label or category is missing or invalid
		"""
		label = data.get("label")
		if not isinstance(label, str) or not label:
			raise ValueError("Suggestion label required")
		category = data.get("category")
		if not isinstance(category, str):
			raise ValueError("Suggestion category required")
		insert_text = data.get("insert_text")
		if insert_text is None:
			insert_text = label
		return cls(
			label=label,
			insert_text=str(insert_text),
			category=SuggestionCategory.from_label(category),
			description=data.get("description"),
			param_type=data.get("param_type")
		)


@dataclass(frozen=True)
class ApplyResult:
	new_query: str
	new_cursor_position: int

	def to_dict(self) -> Dict[str, Any]:
		return {"query": self.new_query, "cursor": self.new_cursor_position}


@dataclass(frozen=True)
class PrefixOperator:
	prefix: str
	label: str
	description: str


@dataclass(frozen=True)
class GlobalParameter:
	name: str
	type: str
	description: str


@dataclass(frozen=True)
class SearchParam:
	"""A search parameter declared by the server for one resource type."""
	name: str
	type: Optional[str] = None
	documentation: Optional[str] = None
