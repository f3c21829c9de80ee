# this project is licensed under the WTFPLv2, see COPYING.txt for details

"""Path utilities"""

import xdg.BaseDirectory

__all__ = ('get_config_path',)


APP_NAME = 'eolmark'


def get_config_path(*args):
	"""Return (and create if needed) a directory in the user config dir

	The base is `$XDG_CONFIG_HOME/eolmark`.
	"""
	return xdg.BaseDirectory.save_config_path(APP_NAME, *args)
