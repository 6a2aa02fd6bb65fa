"""
FHIR Type Registry

Static lookups used by the autocomplete core: resource types, modifiers,
prefix operators, global parameters, enumerations and reference targets.
"""

import logging
from typing import Dict, List, Optional

from fhirq.data import DEFAULT_VERSION, SHARED_DATA, VERSION_DATA
from fhirq.models import GlobalParameter, PrefixOperator

logger = logging.getLogger(__name__)


def fhir_version_from_capability(version: Optional[str]) -> Optional[str]:
	"""
	Map a CapabilityStatement fhirVersion (e.g. "4.0.1") to a registry version.
	Returns None when the version string is missing or unrecognised.
	"""
	if not version:
		return None
	if version.startswith("3."):
		return "STU3"
	if version.startswith("4.0"):
		return "R4"
	if version.startswith("4.3"):
		return "R4B"
	if version.startswith("5."):
		return "R5"
	return None


class TypeRegistry:
	"""Read-only lookup tables for one FHIR version."""

	def __init__(self, version: str = DEFAULT_VERSION):
		if version not in VERSION_DATA:
			logger.warning(f"Unknown FHIR version {version!r}, using {DEFAULT_VERSION}")
			version = DEFAULT_VERSION
		self.version = version
		self._data: Dict = VERSION_DATA[version]

	@classmethod
	def for_version(cls, version: Optional[str]) -> 'TypeRegistry':
		return cls(version or DEFAULT_VERSION)

	def resource_types(self) -> List[str]:
		return list(self._data["resource_types"])

	def search_resource_types(self, prefix: str) -> List[str]:
		if not prefix:
			return self.resource_types()
		lower_prefix = prefix.lower()
		return [t for t in self._data["resource_types"] if t.lower().startswith(lower_prefix)]

	def is_valid_resource_type(self, name: str) -> bool:
		return name in self._data["resource_types"]

	def modifiers(self, param_type: Optional[str]) -> List[str]:
		return list(SHARED_DATA["modifiers"].get(param_type, []))

	def prefix_operators(self) -> List[PrefixOperator]:
		return list(SHARED_DATA["prefix_operators"])

	def global_parameters(self) -> List[GlobalParameter]:
		return list(SHARED_DATA["global_parameters"])

	def search_global_parameters(self, prefix: str) -> List[GlobalParameter]:
		lower_prefix = (prefix or "").lower()
		return [p for p in SHARED_DATA["global_parameters"] if p.name.lower().startswith(lower_prefix)]

	def global_parameter(self, name: str) -> Optional[GlobalParameter]:
		for param in SHARED_DATA["global_parameters"]:
			if param.name == name:
				return param
		return None

	def enum_values(self, field_path: str) -> Optional[List[str]]:
		values = self._data["enum_values"].get(field_path)
		return list(values) if values is not None else None

	def reference_targets(self, param_name: str) -> List[str]:
		return list(self._data["reference_targets"].get(param_name, []))
