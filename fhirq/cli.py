import argparse
import json
import logging
import sys

from fhirq.config import AssistConfig
from fhirq.logger import setup_logging
from fhirq.metadata import CapabilityLoader, MetadataError
from fhirq.query import QueryAssistant
from fhirq.registry import TypeRegistry

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="FHIR query autocomplete")
	parser.add_argument("--config", default=None, help="JSON config file")
	parser.add_argument("--base-url", "-b", default=None, help="FHIR server base URL")
	parser.add_argument("--fhir-version", default=None, help="Registry version (STU3, R4, R4B, R5)")
	parser.add_argument("--metadata-file", "-m", default=None, help="CapabilityStatement cache file")
	parser.add_argument("--refresh", action="store_true", help="Ignore the metadata cache and fetch from the server")
	parser.add_argument("--complete", default=None, metavar="QUERY", help="Print suggestions for QUERY and exit")
	parser.add_argument("--cursor", type=int, default=None, help="Cursor position for --complete (default: end)")
	parser.add_argument("--host", default=DEFAULT_HOST, help="Server host")
	parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Server port")
	parser.add_argument("--no-server", action="store_true", help="Load metadata and exit")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging")
	return parser


def load_config(args) -> AssistConfig:
	config = AssistConfig.load(args.config) if args.config else AssistConfig()
	if args.base_url:
		config.base_url = args.base_url
	if args.fhir_version:
		config.fhir_version = args.fhir_version
	if args.metadata_file:
		config.metadata_cache_file = args.metadata_file
	return config


def load_metadata(assistant: QueryAssistant, loader: CapabilityLoader, refresh: bool = False) -> bool:
	"""Load capability metadata into the assistant. Failures leave it without metadata."""
	if not loader.base_url and not loader.cache_file:
		logger.info("No FHIR server or metadata file given, using registry data only")
		return False
	try:
		assistant.set_metadata(loader.load(prefer_cache=not refresh))
		return True
	except MetadataError as e:
		logger.warning(f"Metadata unavailable, autocomplete will have limited functionality: {e}")
		return False


def main(argv=None):
	args = build_parser().parse_args(argv)
	
	# Keep stdout clean for --complete output
	setup_logging(level=logging.DEBUG if args.debug else logging.INFO,
				  stream=sys.stderr if args.complete is not None else None)
	
	config = load_config(args)
	if not config.validate():
		logger.critical("Invalid configuration")
		return 2
	
	assistant = QueryAssistant(TypeRegistry(config.fhir_version), limit=config.max_suggestions)
	loader = CapabilityLoader(
		base_url=config.base_url,
		cache_file=config.metadata_cache_file,
		timeout=config.timeout,
		headers=config.headers
	)
	load_metadata(assistant, loader, refresh=args.refresh)
	
	if args.complete is not None:
		parsed, suggestions = assistant.complete(args.complete, args.cursor)
		print(json.dumps({
			"context": parsed.context.label,
			"suggestions": [s.to_dict() for s in suggestions[:assistant.limit]]
		}, indent=2))
		return 0
	
	if args.no_server:
		return 0
	
	from fhirq_server import ServerConfig, run_server
	
	try:
		logger.info("Press Ctrl+C to stop")
		run_server(ServerConfig(host=args.host, port=args.port, debug=args.debug), config, assistant, loader)
	except KeyboardInterrupt:
		logger.info("Shutting down...")
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
