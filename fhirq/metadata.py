"""
Capability metadata for the autocomplete core.

A CapabilitySnapshot is an immutable view over a server's
CapabilityStatement. The MetadataStore holds the current snapshot and is
swapped wholesale by the loader; the core only ever reads it.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests

from fhirq.models import SearchParam

logger = logging.getLogger(__name__)


class MetadataError(Exception):
	"""Raised when capability metadata cannot be fetched or understood."""


@dataclass(frozen=True)
class ResourceCapability:
	type: str
	search_params: Tuple[SearchParam, ...] = ()
	includes: Tuple[str, ...] = ()
	rev_includes: Tuple[str, ...] = ()


def _strings(values: Any) -> Tuple[str, ...]:
	if not isinstance(values, list):
		return ()
	return tuple(v for v in values if isinstance(v, str) and v)


def _parse_resource(entry: Dict[str, Any]) -> Optional[ResourceCapability]:
	resource_type = entry.get("type")
	if not isinstance(resource_type, str) or not resource_type:
		return None
	
	params = []
	for raw in entry.get("searchParam") or []:
		if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
			continue
		params.append(SearchParam(
			name=raw["name"],
			type=raw.get("type"),
			documentation=raw.get("documentation")
		))
	
	return ResourceCapability(
		type=resource_type,
		search_params=tuple(params),
		includes=_strings(entry.get("searchInclude")),
		rev_includes=_strings(entry.get("searchRevInclude"))
	)


@dataclass(frozen=True)
class CapabilitySnapshot:
	"""Search capabilities declared by one server, keyed by resource type."""
	resources: Dict[str, ResourceCapability] = field(default_factory=dict)
	fhir_version: Optional[str] = None
	software: Optional[str] = None

	@classmethod
	def from_capability_statement(cls, document: Dict[str, Any]) -> 'CapabilitySnapshot':
		"""
		Build a snapshot from a CapabilityStatement (or STU3 Conformance) document.
		Only the first rest entry is read.

		:raises MetadataError: if the document is not a capability statement
		"""
		if not isinstance(document, dict):
			raise MetadataError("Capability document must be a JSON object")
		resource_type = document.get("resourceType")
		if resource_type not in ("CapabilityStatement", "Conformance"):
			raise MetadataError(f"Expected a CapabilityStatement, got {resource_type!r}")
		
		resources = {}
		rest = document.get("rest")
		if isinstance(rest, list) and rest and isinstance(rest[0], dict):
			for entry in rest[0].get("resource") or []:
				if not isinstance(entry, dict):
					continue
				capability = _parse_resource(entry)
				if capability is None:
					continue
				resources[capability.type] = capability
		
		software = document.get("software")
		return cls(
			resources=resources,
			fhir_version=document.get("fhirVersion"),
			software=software.get("name") if isinstance(software, dict) else None
		)

	def resource_types(self) -> List[str]:
		return sorted(self.resources)

	def search_parameters(self, resource_type: Optional[str]) -> Optional[List[SearchParam]]:
		"""Declared search parameters, or None when the resource is not declared."""
		capability = self.resources.get(resource_type) if resource_type else None
		if capability is None:
			return None
		return list(capability.search_params)

	def search_parameter(self, resource_type: Optional[str], name: str) -> Optional[SearchParam]:
		for param in self.search_parameters(resource_type) or []:
			if param.name == name:
				return param
		return None

	def include_paths(self, resource_type: Optional[str]) -> List[str]:
		capability = self.resources.get(resource_type) if resource_type else None
		return list(capability.includes) if capability else []

	def rev_include_paths(self, resource_type: Optional[str]) -> List[str]:
		capability = self.resources.get(resource_type) if resource_type else None
		return list(capability.rev_includes) if capability else []

	def summary(self) -> Dict[str, Any]:
		return {
			"loaded": True,
			"fhir_version": self.fhir_version,
			"software": self.software,
			"resource_count": len(self.resources),
			"search_param_count": sum(len(r.search_params) for r in self.resources.values())
		}


class MetadataStore:
	"""
	Holder for the current CapabilitySnapshot.

	Readers take `store.snapshot` once and work on that object; writers
	replace it wholesale, never mutate it.
	"""

	def __init__(self, snapshot: Optional[CapabilitySnapshot] = None):
		self._lock = threading.Lock()
		self._snapshot = snapshot

	@property
	def snapshot(self) -> Optional[CapabilitySnapshot]:
		return self._snapshot

	@property
	def loaded(self) -> bool:
		return self._snapshot is not None

	def replace(self, snapshot: Optional[CapabilitySnapshot]):
		with self._lock:
			self._snapshot = snapshot
		if snapshot is None:
			logger.info("Capability metadata cleared")
		else:
			logger.info(f"Capability metadata loaded ({len(snapshot.resources)} resource types)")

	def clear(self):
		self.replace(None)

	def summary(self) -> Dict[str, Any]:
		snapshot = self._snapshot
		if snapshot is None:
			return {"loaded": False}
		return snapshot.summary()


class CapabilityLoader:
	"""Fetches a server's CapabilityStatement and keeps a JSON file cache of it."""

	ACCEPT = "application/fhir+json, application/json"

	def __init__(self, base_url: Optional[str] = None, cache_file: Optional[str] = None,
				 timeout: float = 30, headers: Optional[Dict[str, str]] = None,
				 session: Optional[requests.Session] = None):
		self.base_url = base_url.rstrip("/") if base_url else None
		self.cache_file = Path(cache_file) if cache_file else None
		self.timeout = timeout
		self.session = session or requests.Session()
		self.session.headers.update({"Accept": self.ACCEPT})
		if headers:
			self.session.headers.update(headers)

	@property
	def metadata_url(self) -> str:
		return self.metadata_url_for(self.base_url)

	def metadata_url_for(self, base_url: Optional[str]) -> str:
		if not base_url:
			raise MetadataError("No FHIR base URL configured")
		return f"{base_url.rstrip('/')}/metadata"

	def fetch(self, base_url: Optional[str] = None) -> Dict[str, Any]:
		"""
		Download the raw capability document from base_url, or from the
		configured base URL when none is given.

		:raises MetadataError: on transport errors, HTTP errors or invalid JSON
		"""
		url = self.metadata_url_for(base_url or self.base_url)
		logger.info(f"Fetching capability statement: {url}")
		try:
			resp = self.session.get(url, timeout=self.timeout)
			resp.raise_for_status()
			return resp.json()
		except requests.RequestException as e:
			logger.error(f"Capability request failed: GET {url} - {e}")
			raise MetadataError(f"Could not fetch {url}: {e}") from e
		except ValueError as e:
			logger.error(f"Capability response from {url} is not JSON: {e}")
			raise MetadataError(f"Invalid JSON from {url}") from e

	def read_cache(self) -> Optional[Dict[str, Any]]:
		"""Return the cached raw document, or None if there is no usable cache."""
		if self.cache_file is None or not self.cache_file.exists():
			return None
		try:
			with open(self.cache_file, 'r', encoding='utf-8') as f:
				return json.load(f)
		except (ValueError, IOError) as e:
			logger.warning(f"Failed to read metadata cache {self.cache_file}: {e}")
			return None

	def write_cache(self, document: Dict[str, Any]):
		if self.cache_file is None:
			return
		try:
			self.cache_file.parent.mkdir(parents=True, exist_ok=True)
			with open(self.cache_file, 'w', encoding='utf-8') as f:
				json.dump(document, f)
			logger.debug(f"Saved metadata cache to {self.cache_file}")
		except IOError as e:
			logger.warning(f"Failed to write metadata cache {self.cache_file}: {e}")

	def load(self, prefer_cache: bool = True, base_url: Optional[str] = None) -> CapabilitySnapshot:
		"""
		Produce a snapshot from the file cache when allowed, else from the server
		(base_url overrides the configured one for this call only).
		A successful server fetch refreshes the cache.

		:raises MetadataError: if neither source yields a capability statement
		"""
		if prefer_cache:
			cached = self.read_cache()
			if cached is not None:
				try:
					snapshot = CapabilitySnapshot.from_capability_statement(cached)
					logger.info(f"Using cached capability statement from {self.cache_file}")
					return snapshot
				except MetadataError as e:
					logger.warning(f"Ignoring metadata cache: {e}")
		
		document = self.fetch(base_url)
		snapshot = CapabilitySnapshot.from_capability_statement(document)
		self.write_cache(document)
		return snapshot

	def refresh(self, store: MetadataStore, prefer_cache: bool = False) -> CapabilitySnapshot:
		snapshot = self.load(prefer_cache=prefer_cache)
		store.replace(snapshot)
		return snapshot
