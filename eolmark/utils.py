# this project is licensed under the WTFPLv2, see COPYING.txt for details

from contextlib import contextmanager
import logging

__all__ = ('exception_logging',)

LOGGER = logging.getLogger(__name__)


@contextmanager
def exception_logging(reraise=True, logger=None, level=logging.ERROR):
	"""Context manager to log exceptions

	Within this context, if an exception is raised and not caught, it is logged with its
	traceback, then continues upper in the stack frames.

	:param reraise: if False, uncaught exceptions are intercepted and not raised to upper
	                frames (the code in this context is still aborted)
	:param logger: logger where to log the exceptions. If None, this module's logger is used
	:param level: level with which to log the exceptions

	Listener callbacks are run this way so one failing callback does not break the others::

		for cb in callbacks:
			with exception_logging(reraise=False):
				cb()
	"""
	try:
		yield
	except Exception:
		if logger is None:
			logger = LOGGER
		logger.log(level, 'an exception occured', exc_info=True)
		if reraise:
			raise
