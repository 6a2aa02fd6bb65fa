from .models import ParsedQuery, QueryContext, Suggestion, SuggestionCategory, ApplyResult
from .registry import TypeRegistry
from .metadata import CapabilitySnapshot, MetadataStore, CapabilityLoader, MetadataError
from .query import QueryAssistant, QueryClassifier, SuggestionEngine, EditApplier, CursorOutOfRangeError
from .config import AssistConfig
