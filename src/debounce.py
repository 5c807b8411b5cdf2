"""
Debounced search input.
Collapses a burst of input changes into one downstream query once the input has been quiet
for `wait` seconds, and suppresses a query whose raw input equals the previously settled input.
An explicit submit (flush) always emits the current non-blank input.
"""

import threading  # timers and a lock around pending state
from typing import Callable, Optional  # type hints

from loguru import logger  # console logging


class Debouncer:
	"""
	Emit at most one value per quiescence window, skipping blanks and unchanged input.
	The distinct check runs on raw settled values, so clearing the box and retyping
	the same text queries again.
	`timer_factory` must build an object with start()/cancel() from (interval, function),
	like threading.Timer.
	"""

	def __init__(
		self,
		callback: Callable[[str], None],
		wait: float = 0.5,
		timer_factory: Callable[..., threading.Timer] = threading.Timer,
	):
		self.callback = callback  # receives the trimmed query
		self.wait = wait  # quiescence window in seconds
		self.timer_factory = timer_factory  # injectable for tests
		self._lock = threading.Lock()
		self._timer = None  # pending timer, if any
		self._pending: Optional[str] = None  # latest value not yet settled
		self._current: Optional[str] = None  # latest value pushed (what the input box shows)
		self._last_settled: Optional[str] = None  # raw value of the last quiet period, blanks included
		self._generation = 0  # bumped on every change; stale timers compare against it

	def push(self, value: Optional[str]):
		"""Record an input change and restart the quiescence timer."""
		with self._lock:
			self._pending = value
			self._current = value
			self._generation += 1
			generation = self._generation
			if self._timer is not None:
				self._timer.cancel()
			self._timer = self.timer_factory(self.wait, lambda: self._fire(generation))
			self._timer.start()

	def flush(self):
		"""Emit the current input immediately (explicit submit), even if it was already searched."""
		with self._lock:
			if self._timer is not None:
				self._timer.cancel()
				self._timer = None
			self._generation += 1
			raw = self._current
			self._pending = None
			self._last_settled = raw or ''
			value = (raw or '').strip()
		if value:
			self._emit(value)

	def cancel(self):
		"""Drop the pending value without emitting."""
		with self._lock:
			if self._timer is not None:
				self._timer.cancel()
			self._timer = None
			self._pending = None
			self._current = None
			self._generation += 1

	def _fire(self, generation: int):
		with self._lock:
			if generation != self._generation:
				return  # superseded by a later change
			raw = self._pending or ''
			self._pending = None
			self._timer = None
			if raw == self._last_settled:
				return
			self._last_settled = raw
		value = raw.strip()
		if value:
			self._emit(value)

	def _emit(self, value: str):
		logger.debug(f"[Debounce] Emitting query '{value}'")
		self.callback(value)
