from .classifier import QueryClassifier, resolve_param_type
from .suggestions import SuggestionEngine, rank
from .applier import EditApplier, CursorOutOfRangeError
from .assistant import QueryAssistant, DEFAULT_LIMIT

__all__ = [
	"QueryClassifier",
	"SuggestionEngine",
	"EditApplier",
	"CursorOutOfRangeError",
	"QueryAssistant",
	"DEFAULT_LIMIT",
	"resolve_param_type",
	"rank",
]
