import logging
from typing import Optional
from flask import Flask

from fhirq.config import AssistConfig
from fhirq.metadata import CapabilityLoader
from fhirq.query import QueryAssistant
from fhirq.registry import TypeRegistry

from .config import ServerConfig

logger = logging.getLogger(__name__)


def create_app(config: Optional[ServerConfig] = None, assist_config: Optional[AssistConfig] = None,
			   assistant: Optional[QueryAssistant] = None, loader: Optional[CapabilityLoader] = None) -> Flask:
	"""Create and configure the Flask application."""
	if config is None:
		config = ServerConfig()
	if assist_config is None:
		assist_config = AssistConfig()
	if assistant is None:
		assistant = QueryAssistant(TypeRegistry(assist_config.fhir_version), limit=assist_config.max_suggestions)
	if loader is None:
		loader = CapabilityLoader(
			base_url=assist_config.base_url,
			cache_file=assist_config.metadata_cache_file,
			timeout=assist_config.timeout,
			headers=assist_config.headers
		)
	
	app = Flask(__name__)
	
	# Configure app
	app.config["SECRET_KEY"] = config.secret_key
	app.config["FHIRQ_CONFIG"] = config
	app.config["FHIRQ_ASSIST_CONFIG"] = assist_config
	app.config["FHIRQ_ASSISTANT"] = assistant
	app.config["FHIRQ_LOADER"] = loader
	
	# Register blueprints
	from .routes.api import api_bp
	
	app.register_blueprint(api_bp, url_prefix="/api")
	
	logger.info(f"Query assistant server initialized (FHIR {assistant.registry.version})")
	
	return app


def run_server(config: Optional[ServerConfig] = None, assist_config: Optional[AssistConfig] = None,
			   assistant: Optional[QueryAssistant] = None, loader: Optional[CapabilityLoader] = None):
	"""Run the query assistant web server."""
	if config is None:
		config = ServerConfig()
	
	app = create_app(config, assist_config, assistant, loader)
	
	logger.info(f"Starting query assistant on http://{config.host}:{config.port}")
	
	app.run(
		host=config.host,
		port=config.port,
		debug=config.debug,
		threaded=True
	)
