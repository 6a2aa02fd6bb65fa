import logging, sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def setup_logging(level = logging.INFO, stream = None):
	root_logger = logging.getLogger()
	root_logger.setLevel(level)

	# Replace a handler installed by an earlier call instead of stacking another
	for existing in list(root_logger.handlers):
		if getattr(existing, "_fhirq_handler", False):
			root_logger.removeHandler(existing)

	handler = logging.StreamHandler(stream or sys.stdout)
	handler._fhirq_handler = True
	
	formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
	handler.setFormatter(formatter)
	root_logger.addHandler(handler)
