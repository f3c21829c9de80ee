#!/usr/bin/env python3
# this project is licensed under the WTFPLv2, see COPYING.txt for details

import argparse
import glob
import logging
import os
import sys

from PyQt5.QtWidgets import QApplication

from eolmark import pathutils
from eolmark.helpers import trailing_newline

__all__ = ('App', 'qApp', 'main')


def qApp():
	return QApplication.instance()


class App(QApplication):
	"""Application showing files with the trailing newline marker"""

	def __init__(self, argv):
		super().__init__(argv)
		self.setApplicationName('eolmark')
		self.setApplicationDisplayName('eolmark')

		self.logger = logging.getLogger()

		self.args = None
		self.window = None

	def init_ui(self):
		from eolmark.widgets.window import Window

		win = Window()
		win.create_default_menu_bar()
		win.quit_requested.connect(self.quit)
		return win

	def startup_scripts(self):
		"""Get list of startup script files, sorted by name"""
		files = glob.glob(os.path.join(pathutils.get_config_path('startup'), '*.py'))
		files.sort()
		return files

	def script_dict(self):
		"""Build a env suitable for running conf scripts.

		The built dict will contain `'qApp'` key pointing to this App instance.
		"""
		return {'qApp': self}

	def run_start_scripts(self):
		for f in self.startup_scripts():
			self.run_script(f)

	def run_script(self, path):
		"""Run a config script in this app

		The script is run with the variables returned by :any:`script_dict`.
		Exceptions raised by the script are caught and logged.
		"""
		self.logger.debug('execing script %s', path)
		try:
			execfile(path, self.script_dict())
		except Exception:
			self.logger.error('cannot execute startup script %r', path, exc_info=True)

	def run(self):
		"""Run app until exit

		Handle command-line args, run config scripts, create the window and open files.
		Does not return until app is quit.
		"""
		self.parse_arguments()
		self.init_logging()

		if not self.args.no_config:
			self.run_start_scripts()

		trailing_newline.configure(
			symbol=self.args.symbol,
			show_line_number=False if self.args.no_line_number else None,
		)
		if not self.args.no_global:
			trailing_newline.global_trailing_newline_mode(True)

		self.window = self.init_ui()
		self.window.show()
		self.open_command_line_files()

		return self.exec_()

	def parse_arguments(self):
		parser = argparse.ArgumentParser(prog='eolmark')
		parser.add_argument('files', metavar='FILE', nargs='*')
		parser.add_argument('--debug', action='store_true', default=False)
		parser.add_argument('--debug-only', action='append', default=[], metavar='LOGGER')
		parser.add_argument('--no-config', action='store_true', default=False,
		                    help='do not run startup scripts')
		parser.add_argument('--symbol', default=None,
		                    help='text shown in the margin of the trailing empty line')
		parser.add_argument('--no-line-number', action='store_true', default=False,
		                    help='do not append the line number to the symbol')
		parser.add_argument('--no-global', action='store_true', default=False,
		                    help='do not enable the marker automatically')

		argv = self.arguments()[1:]
		self.args = parser.parse_args(argv)

	def init_logging(self):
		if self.args.debug:
			self.logger.handlers[0].setLevel(logging.DEBUG)
		for logger_name in self.args.debug_only:
			handler = logging.StreamHandler()
			handler.setFormatter(logging.Formatter('%(levelname)s:%(name)s:%(message)s'))
			handler.setLevel(logging.DEBUG)

			logger = logging.getLogger(logger_name)
			logger.addHandler(handler)

	def open_command_line_files(self):
		for name in self.args.files:
			self.window.open_editor(os.path.abspath(name))


def setup_logging():
	logging.basicConfig()
	root = logging.getLogger()
	root.setLevel(logging.DEBUG)
	root.handlers[0].setLevel(logging.WARNING)


def execfile(path, globals):
	"""Exec Python `file` with `globals`"""
	with open(path) as fd:
		src = fd.read()
	code = compile(src, path, 'exec')
	exec(code, globals)  # pylint: disable=exec-used


def main():
	"""Run eolmark app"""

	# PyQt5 aborts the app on unhandled exceptions when the default excepthook is used
	if sys.excepthook is sys.__excepthook__:
		sys.excepthook = lambda *args: sys.__excepthook__(*args)

	setup_logging()

	app = App(sys.argv)
	return app.run()


if __name__ == '__main__':
	sys.exit(main())
