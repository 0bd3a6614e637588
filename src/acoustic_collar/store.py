"""Settings store - owns the live configuration and notifies subscribers."""

import copy
import dataclasses
import itertools
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Dict, Mapping, Optional, Union

from acoustic_collar.exceptions import ValidationError
from acoustic_collar.models import AppSettings, EventStep, parse_settings_fields
from acoustic_collar.validation import validate_event_step, validate_settings

logger = logging.getLogger(__name__)

Subscriber = Callable[[AppSettings], None]


class SettingsStore:
    """Observable holder of one live AppSettings value.

    Every mutation is validated first; a rejected mutation raises and leaves
    the configuration and subscribers untouched. Successful mutations notify
    all subscribers synchronously, in subscription order, before returning.
    A mutation made from inside a subscriber is delivered after the update
    being fanned out, so each subscriber sees updates in the order applied.
    Subscribers always receive a copy, never the live value.

    Example:
        >>> from acoustic_collar import SettingsStore
        >>>
        >>> store = SettingsStore()
        >>> unsubscribe = store.subscribe(lambda s: print(s.mic_sensitivity))
        27
        >>> store.update_settings(mic_sensitivity=28)
        28
        >>> unsubscribe()
    """

    def __init__(self, initial: Optional[AppSettings] = None):
        """Initialize the store.

        Args:
            initial: Starting configuration (defaults if None)

        Raises:
            ValidationError: If the initial configuration is invalid
        """
        settings = copy.deepcopy(initial) if initial is not None else AppSettings()
        validate_settings(settings)
        self._settings = settings
        self._subscribers: Dict[int, Subscriber] = {}
        self._handle_ids = itertools.count(1)
        # Snapshots waiting to be delivered; drained by the outermost mutation
        self._pending: Deque[AppSettings] = deque()
        self._notifying = False
        # Re-entrant so a subscriber may mutate the store from its callback
        self._lock = threading.RLock()

    @property
    def settings(self) -> AppSettings:
        """A snapshot of the current configuration."""
        with self._lock:
            return copy.deepcopy(self._settings)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for configuration changes.

        The callback is invoked immediately with the current configuration
        and again after every successful mutation.

        Args:
            callback: Function receiving an AppSettings snapshot

        Returns:
            A function that removes the subscription (safe to call twice)
        """
        with self._lock:
            handle = next(self._handle_ids)
            self._subscribers[handle] = callback
            logger.debug(f"Subscriber {handle} added ({len(self._subscribers)} active)")
            self._notify_one(handle, callback, copy.deepcopy(self._settings))

        def unsubscribe() -> None:
            with self._lock:
                if self._subscribers.pop(handle, None) is not None:
                    logger.debug(f"Subscriber {handle} removed ({len(self._subscribers)} active)")

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def update_settings(self, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        """Shallow-merge a partial configuration onto the current one.

        Keys present in the partial (or given as keyword arguments) replace
        the current values; absent keys are left untouched.

        Args:
            partial: Mapping of field name to new value
            **fields: Additional fields, applied after the mapping

        Raises:
            ValidationError: On unknown keys or if the result breaks an invariant
        """
        changes: Dict[str, Any] = dict(partial or {})
        changes.update(fields)

        with self._lock:
            try:
                parsed = parse_settings_fields(copy.deepcopy(changes))
                candidate = dataclasses.replace(copy.deepcopy(self._settings), **parsed)
                validate_settings(candidate)
            except ValidationError as e:
                logger.warning(f"Rejected settings update {sorted(changes)}: {e}")
                raise

            self._settings = candidate
            logger.info(f"Settings updated: {', '.join(sorted(parsed)) or '(no fields)'}")
            self._notify()

    def set_settings(self, settings: AppSettings) -> None:
        """Replace the whole configuration.

        Raises:
            ValidationError: If the new configuration is invalid
        """
        with self._lock:
            candidate = copy.deepcopy(settings)
            try:
                validate_settings(candidate)
            except ValidationError as e:
                logger.warning(f"Rejected settings replacement: {e}")
                raise

            self._settings = candidate
            logger.info("Settings replaced")
            self._notify()

    def add_event_step(self, key: str, step: Union[EventStep, Mapping[str, Any]]) -> None:
        """Append a step to the end of a step sequence.

        Args:
            key: 'correction_steps' or 'affirmation_steps'
            step: The step, as an EventStep or a plain mapping

        Raises:
            ValidationError: If the key is unknown or the step is invalid
        """
        with self._lock:
            steps = self._settings.steps(key)
            new_step = copy.deepcopy(EventStep.from_dict(step))
            label = f"{key}[{len(steps)}]"
            try:
                validate_event_step(new_step, self._settings, label=label)
            except ValidationError as e:
                logger.warning(f"Rejected event step for {key}: {e}")
                raise

            steps.append(new_step)
            logger.info(f"Added {new_step} as {label}")
            self._notify()

    def remove_event_step(self, key: str, index: int) -> None:
        """Remove the step at a position; later steps shift down by one.

        Args:
            key: 'correction_steps' or 'affirmation_steps'
            index: 0-based position of the step to remove

        Raises:
            ValidationError: If the key is unknown
            IndexError: If index is outside [0, len)
        """
        with self._lock:
            steps = self._settings.steps(key)
            if isinstance(index, bool) or not isinstance(index, int):
                raise IndexError(f"{key} index must be an integer, got {index!r}")
            if not 0 <= index < len(steps):
                raise IndexError(f"{key} index {index} out of range (length {len(steps)})")

            removed = steps.pop(index)
            logger.info(f"Removed {removed} from {key}[{index}]")
            self._notify()

    def _notify(self) -> None:
        """Queue a snapshot of the current configuration and fan it out.

        A mutation made from inside a subscriber only queues its snapshot;
        the outermost mutation drains the queue, so every subscriber sees
        every update in the order the updates were applied.
        """
        self._pending.append(copy.deepcopy(self._settings))
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending:
                snapshot = self._pending.popleft()
                # Copy the handle list: callbacks may unsubscribe while we iterate
                for handle, callback in list(self._subscribers.items()):
                    if handle in self._subscribers:
                        self._notify_one(handle, callback, copy.deepcopy(snapshot))
        finally:
            self._pending.clear()
            self._notifying = False

    def _notify_one(self, handle: int, callback: Subscriber, snapshot: AppSettings) -> None:
        try:
            callback(snapshot)
        except Exception as e:
            logger.error(f"Error in settings subscriber {handle}: {e}", exc_info=True)
