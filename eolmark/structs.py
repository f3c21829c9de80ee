# this project is licensed under the WTFPLv2, see COPYING.txt for details

__all__ = ('PropDict',)


class PropDict(dict):
	"""dict whose keys can also be accessed as attributes

	Used for option sets and small state records::

		options = PropDict(symbol='>', show_line_number=True)
		options.symbol = '$'
	"""

	def __getattr__(self, k: str):
		try:
			return self[k]
		except KeyError:
			# AttributeError so getattr() with a default works
			raise AttributeError('object has no attribute %r' % k)

	def __setattr__(self, k: str, v):
		self[k] = v

	def __delattr__(self, k: str):
		try:
			del self[k]
		except KeyError:
			raise AttributeError('object has no attribute %r' % k)
