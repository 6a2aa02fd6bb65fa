from dataclasses import dataclass, field
import os
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
	"""Configuration for the query assistant web server."""
	host: str = "127.0.0.1"
	port: int = 8080
	debug: bool = False
	secret_key: str = field(default_factory=lambda: os.urandom(24).hex())
	
	def __post_init__(self):
		if isinstance(self.port, str):
			self.port = int(self.port)
		if not 0 < self.port < 65536:
			raise ValueError(f"Invalid port: {self.port}")
