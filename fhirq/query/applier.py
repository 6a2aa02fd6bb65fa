"""
Applies an accepted suggestion to the query text.

The context is always re-derived from the text and cursor, so the
replaced range matches what the classifier sees now rather than what it
saw when the suggestion was produced.
"""

import logging

from fhirq.models import REFERENCE_TYPE, ApplyResult, QueryContext, Suggestion
from fhirq.query.classifier import QueryClassifier

logger = logging.getLogger(__name__)


class CursorOutOfRangeError(IndexError):
	"""Raised when a cursor offset lies outside the query text."""
	def __init__(self, cursor_position: int, length: int):
		self.cursor_position = cursor_position
		self.length = length
		super().__init__(f"Cursor position {cursor_position} outside query of length {length}")


class EditApplier:
	"""Computes the text splice for an accepted suggestion."""

	def __init__(self, classifier: QueryClassifier):
		self.classifier = classifier

	def apply(self, query: str, cursor_position: int, suggestion: Suggestion) -> ApplyResult:
		"""
		Replace the token under the cursor with `suggestion.insert_text`.

		Text from the context's anchor delimiter (exclusive) up to the cursor
		is replaced; everything before the anchor and after the cursor is kept.

		:raises CursorOutOfRangeError: if cursor_position is outside [0, len(query)]
		"""
		if cursor_position < 0 or cursor_position > len(query):
			raise CursorOutOfRangeError(cursor_position, len(query))
		
		parsed = self.classifier.classify(query, cursor_position)
		before = query[:cursor_position]
		after = query[cursor_position:]
		insert_text = suggestion.insert_text
		context = parsed.context
		
		if context in (QueryContext.RESOURCE_TYPE, QueryContext.RESOURCE_OPERATION):
			anchor = before.rfind('/') + 1
		
		elif context == QueryContext.PARAMETER_NAME:
			anchor = max(before.rfind('?'), before.rfind('&')) + 1
		
		elif context == QueryContext.MODIFIER:
			anchor = before.rfind(':') + 1
			# A chain target is followed by a chained parameter, a modifier by a value
			insert_text += '.' if suggestion.param_type == REFERENCE_TYPE else '='
		
		elif context == QueryContext.PARAMETER_VALUE:
			anchor = before.rfind('=') + 1
		
		elif context in (QueryContext.INCLUDE_VALUE, QueryContext.REVINCLUDE_VALUE):
			eq_pos = before.rfind('=')
			comma = before[eq_pos + 1:].rfind(',')
			anchor = eq_pos + 1 + (comma + 1 if comma >= 0 else 0)
		
		elif context == QueryContext.CHAINED_PARAMETER:
			anchor = before.rfind('.') + 1
		
		else:
			logger.debug(f"Nothing to apply in {context.label} context")
			return ApplyResult(new_query=query, new_cursor_position=cursor_position)
		
		head = before[:anchor]
		return ApplyResult(
			new_query=head + insert_text + after,
			new_cursor_position=len(head) + len(insert_text)
		)
