"""In-process notifications for live displays.

Subscribers connect with ``ballot_cast.connect(callback)``; callbacks receive
the Flask app as sender and the payload as keyword arguments.
"""

from blinker import Namespace

_signals = Namespace()

ballot_cast = _signals.signal("ballot-cast")
session_changed = _signals.signal("session-changed")
