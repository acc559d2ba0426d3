"""
Logging setup shared by the CLI and the HTTP service.
"""

# Standard Library
import logging
import sys


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


#============================================
def setup_logging(verbose: bool = False) -> None:
	"""
	Configure root logging to stdout.

	Args:
		verbose: Log DEBUG messages when True, INFO otherwise.
	"""
	level = logging.INFO
	if verbose:
		level = logging.DEBUG
	logging.basicConfig(
		level=level,
		format=LOG_FORMAT,
		handlers=[logging.StreamHandler(sys.stdout)],
		force=True,
	)
	# pypdf and PIL are chatty at DEBUG
	logging.getLogger("pypdf").setLevel(logging.WARNING)
	logging.getLogger("PIL").setLevel(logging.WARNING)
