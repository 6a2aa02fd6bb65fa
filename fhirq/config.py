import json
import logging
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Dict, Optional

from fhirq.data import DEFAULT_VERSION, VERSION_DATA

logger = logging.getLogger(__name__)


@dataclass
class AssistConfig:
	"""Settings for the query assistant and its metadata loader."""
	base_url: Optional[str] = None  # FHIR server base, e.g. https://hapi.fhir.org/baseDstu3
	fhir_version: str = DEFAULT_VERSION
	timeout: float = 30
	metadata_cache_file: Optional[str] = None  # JSON copy of the last CapabilityStatement
	max_suggestions: int = 15
	headers: Dict[str, str] = field(default_factory=dict)  # extra request headers (auth)
	
	def to_dict(self) -> dict:
		return asdict(self)
	
	@classmethod
	def from_dict(cls, data: dict) -> 'AssistConfig':
		if not isinstance(data, dict):
			raise TypeError(f"Config must be a JSON object, got {type(data).__name__}")
		# Only use known fields
		known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
		return cls(**known)
	
	def save(self, path: Path):
		"""Save config to JSON file."""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			json.dump(self.to_dict(), f, indent=2)
		logger.debug(f"Saved assistant config to {path}")
	
	@classmethod
	def load(cls, path: Path) -> 'AssistConfig':
		"""Load config from JSON file, or return defaults if not found."""
		path = Path(path)
		if not path.exists():
			logger.debug(f"No config found at {path}, using defaults")
			return cls()
		
		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			return cls.from_dict(data)
		except (ValueError, IOError, TypeError) as e:
			logger.warning(f"Failed to load config: {e}, using defaults")
			return cls()
	
	def validate(self) -> bool:
		"""Validate config consistency."""
		if not isinstance(self.fhir_version, str) or self.fhir_version not in VERSION_DATA:
			logger.error(f"Unsupported FHIR version: {self.fhir_version}")
			return False
		if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
			logger.error("Timeout must be positive")
			return False
		if isinstance(self.max_suggestions, bool) or not isinstance(self.max_suggestions, int) or self.max_suggestions < 1:
			logger.error("max_suggestions must be at least 1")
			return False
		if self.base_url is not None and not isinstance(self.base_url, str):
			logger.error("Base URL must be a string")
			return False
		if not isinstance(self.headers, dict):
			logger.error("headers must be an object")
			return False
		if self.base_url and not self.base_url.startswith(("http://", "https://")):
			logger.error(f"Base URL must be http(s): {self.base_url}")
			return False
		return True
