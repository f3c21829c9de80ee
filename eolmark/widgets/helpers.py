# this project is licensed under the WTFPLv2, see COPYING.txt for details

from eolmark.connector import CategoryMixin

__all__ = ('accept_if', 'WidgetMixin')


def accept_if(ev, cond):
	"""Accept an event if a condition is True, else ignore it.

	:param ev: the event to accept or ignore
	:type ev: QEvent
	:param cond: the condition determining whether the event should be accepted or ignored
	:returns: whether the event was accepted or not
	"""
	if cond:
		ev.accept()
	else:
		ev.ignore()
	return ev.isAccepted()


class WidgetMixin(CategoryMixin):
	def __init__(self, **kwargs):
		super().__init__(**kwargs)
