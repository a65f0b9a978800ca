"""
Location resolution session.

One session owns the lifecycle of a single location text field:

    Idle -> Debouncing -> Querying -> Settled
                              |-> Idle + warning (provider error)
                              \\-> (stale result discarded)

Keystrokes are debounced; each forward lookup is tagged with a sequence
number and its result is published only if no newer query, input change,
selection or clear happened while it was in flight. Cancellation is
logical: in-flight lookups are left to finish and their results dropped.
Only the debounce timer is truly cancelled.

The session publishes through plain callbacks:
    on_select(place)      exactly once per successful resolution
    on_clear()            on explicit reset
    on_error(message)     warning text, or None to clear a prior warning
    on_predictions(list)  whenever the visible candidate list changes

Nothing here raises across an await; every failure ends in a discarded
result or a published warning. Sessions are driven from a single event
loop and need no locks.
"""

from __future__ import annotations

import asyncio
import uuid
from enum import Enum
from typing import Any, Callable

from loguru import logger

from carlocator.config import settings
from carlocator.schemas.location import (
    Candidates,
    Coordinate,
    Found,
    PlaceCandidate,
    ProviderError,
    ResolvedPlace,
)
from carlocator.services.geocoding import GeocodingGateway
from carlocator.services.geolocation import (
    GeolocationError,
    GeolocationErrorCode,
    PositionProvider,
    geolocation_message,
)

SUGGESTIONS_FAILED_MESSAGE = "Could not fetch location suggestions. Try again."
CANDIDATE_FAILED_MESSAGE = "Unable to load the selected city. Please try again."
CITY_UNDETERMINED_MESSAGE = "We couldn't determine this city. Please try a different option."
DETECTION_FAILED_MESSAGE = "We couldn't detect your city automatically."
PROVIDER_MISSING_HINT = (
    "Map-powered suggestions will activate once the Google Maps API key is configured."
)


class SessionState(str, Enum):
    """Where the session stands.

    A failed suggestion lookup publishes its warning and returns to IDLE.
    FAILED is left by a candidate or place that could not be resolved.
    """

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    QUERYING = "querying"
    SETTLED = "settled"
    FAILED = "failed"


class LocationSession:
    """Debounced, race-safe resolution of one location input."""

    def __init__(
        self,
        gateway: GeocodingGateway,
        position_provider: PositionProvider | None = None,
        on_select: Callable[[ResolvedPlace], Any] | None = None,
        on_clear: Callable[[], Any] | None = None,
        on_error: Callable[[str | None], Any] | None = None,
        on_predictions: Callable[[list[PlaceCandidate]], Any] | None = None,
        debounce_ms: int | None = None,
        min_query_length: int | None = None,
        geolocation_timeout: float | None = None,
        initial_label: str | None = None,
    ) -> None:
        self._gateway = gateway
        self._position_provider = position_provider
        self._on_select = on_select
        self._on_clear = on_clear
        self._on_error = on_error
        self._on_predictions = on_predictions

        if debounce_ms is None:
            debounce_ms = settings.LOCATION_DEBOUNCE_MS
        self._debounce_seconds = debounce_ms / 1000
        self._min_query_length = (
            settings.LOCATION_MIN_QUERY_LENGTH if min_query_length is None else min_query_length
        )
        self._geolocation_timeout = (
            settings.GEOLOCATION_TIMEOUT_SECONDS
            if geolocation_timeout is None
            else geolocation_timeout
        )

        self._input_text = initial_label or ""
        self._predictions: list[PlaceCandidate] = []
        self._warning: str | None = None
        self._selection: ResolvedPlace | None = None
        self._state = SessionState.IDLE

        # Sequence number of the most recently issued query. Bumped on every
        # invalidation too, so no older tag can match afterwards.
        self._sequence = 0
        self._debounce_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._is_resolving = False
        self._is_detecting = False
        self._session_token = str(uuid.uuid4())

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input_text(self) -> str:
        return self._input_text

    @property
    def predictions(self) -> list[PlaceCandidate]:
        return list(self._predictions)

    @property
    def warning(self) -> str | None:
        return self._warning

    @property
    def selection(self) -> ResolvedPlace | None:
        if self._selection is None:
            return None
        return self._selection.model_copy(deep=True)

    @property
    def is_fetching(self) -> bool:
        return self._state == SessionState.QUERYING or self._is_resolving

    @property
    def is_detecting(self) -> bool:
        return self._is_detecting

    @property
    def suggestions_enabled(self) -> bool:
        return self._gateway.is_configured()

    @property
    def hint(self) -> str | None:
        """Advisory shown when no warning is active and suggestions are off."""
        if self._warning is None and not self.suggestions_enabled:
            return PROVIDER_MISSING_HINT
        return None

    # ------------------------------------------------------------------
    # Text input
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Record a keystroke and (re)arm the debounce timer.

        Must be called from within a running event loop when the trimmed
        text is long enough to trigger a lookup.
        """
        self._input_text = text
        self._cancel_debounce()
        self._invalidate()
        self._set_predictions([])

        query = text.strip()
        if len(query) < self._min_query_length or not self._gateway.is_configured():
            self._state = SessionState.IDLE
            return

        self._state = SessionState.DEBOUNCING
        task = asyncio.get_running_loop().create_task(self._debounce(query))
        self._debounce_task = task
        self._track(task)

    async def _debounce(self, query: str) -> None:
        await asyncio.sleep(self._debounce_seconds)
        # Past this point the timer has fired; the lookup is never cancelled.
        self._debounce_task = None
        await self._run_query(query)

    async def _run_query(self, query: str) -> None:
        self._sequence += 1
        seq = self._sequence
        self._state = SessionState.QUERYING

        try:
            result = await self._gateway.forward_lookup(query, session_token=self._session_token)
        except Exception as e:
            logger.error(f"Unexpected error fetching suggestions for {query!r}: {e}")
            result = ProviderError(message=str(e))

        if seq != self._sequence:
            logger.debug(
                f"Discarding stale suggestions for {query!r} "
                f"(seq={seq}, current={self._sequence})"
            )
            return

        if isinstance(result, ProviderError):
            logger.warning(f"Suggestions unavailable for {query!r}: {result.message}")
            self._set_predictions([])
            self._report_error(SUGGESTIONS_FAILED_MESSAGE)
            self._state = SessionState.IDLE
            return

        items = result.items if isinstance(result, Candidates) else []
        self._set_predictions(items)
        self._state = SessionState.SETTLED
        if self._warning == SUGGESTIONS_FAILED_MESSAGE:
            self._report_error(None)

    def dismiss_predictions(self) -> None:
        """Hide the candidate list, e.g. when focus leaves the field."""
        self._cancel_debounce()
        self._invalidate()
        self._set_predictions([])
        self._state = SessionState.IDLE

    # ------------------------------------------------------------------
    # Resolution paths
    # ------------------------------------------------------------------

    async def select_candidate(self, candidate: PlaceCandidate | str) -> ResolvedPlace | None:
        """Resolve a candidate and publish it. Returns the published place."""
        candidate_id = candidate.id if isinstance(candidate, PlaceCandidate) else candidate
        # Picking a candidate supersedes pending keystrokes and in-flight lookups.
        self._cancel_debounce()
        self._invalidate()
        if self._state in (SessionState.DEBOUNCING, SessionState.QUERYING):
            self._state = SessionState.IDLE
        seq = self._sequence
        self._is_resolving = True
        try:
            result = await self._gateway.resolve_candidate(
                candidate_id, session_token=self._session_token
            )
        except Exception as e:
            logger.error(f"Unexpected error resolving candidate {candidate_id!r}: {e}")
            result = ProviderError(message=str(e))
        finally:
            self._is_resolving = False

        # A resolution closes the provider's autocomplete billing session.
        self._session_token = str(uuid.uuid4())

        if seq != self._sequence:
            logger.debug(f"Discarding resolution of {candidate_id!r}: input changed meanwhile")
            return None

        if isinstance(result, Found):
            return self._publish(result.place)

        logger.warning(f"Could not resolve candidate {candidate_id!r}: {result.kind}")
        self._state = SessionState.FAILED
        self._report_error(CANDIDATE_FAILED_MESSAGE)
        return None

    async def use_current_location(self) -> ResolvedPlace | None:
        """Resolve the device position into a place and publish it.

        Typing, selecting or clearing while detection is in flight drops
        the detected place.
        """
        if self._position_provider is None:
            self._report_error(geolocation_message(GeolocationErrorCode.UNSUPPORTED))
            return None

        self._cancel_debounce()
        self._invalidate()
        if self._state in (SessionState.DEBOUNCING, SessionState.QUERYING):
            self._state = SessionState.IDLE
        self._is_detecting = True
        self._report_error(None)
        seq = self._sequence
        try:
            position = await self._detect_position()
            if seq != self._sequence:
                logger.debug("Discarding device position: input changed meanwhile")
                return None
            if isinstance(position, str):
                self._report_error(position)
                return None

            try:
                result = await self._gateway.reverse_lookup(position)
            except Exception as e:
                logger.error(f"Unexpected error reverse geocoding {position}: {e}")
                result = ProviderError(message=str(e))

            if seq != self._sequence:
                logger.debug(f"Discarding reverse lookup for {position}: input changed meanwhile")
                return None

            if isinstance(result, Found) and result.place.is_valid:
                return self._publish(result.place.model_copy(update={"coordinates": position}))

            logger.warning(f"Could not detect city for {position}: {result.kind}")
            self._report_error(DETECTION_FAILED_MESSAGE)
            return None
        finally:
            self._is_detecting = False

    async def _detect_position(self) -> Coordinate | str:
        """Device coordinate, or the warning text when it is unavailable."""
        try:
            return await asyncio.wait_for(
                self._position_provider.get_current_position(),
                timeout=self._geolocation_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Device position timed out after {self._geolocation_timeout}s")
            return geolocation_message(GeolocationErrorCode.TIMEOUT)
        except GeolocationError as e:
            logger.warning(f"Geolocation error: {e}")
            return geolocation_message(e.code)
        except Exception as e:
            logger.error(f"Unexpected geolocation failure: {e}")
            return geolocation_message(None)

    def apply_manual(self) -> ResolvedPlace | None:
        """Publish the raw input as a city without coordinates."""
        text = self._input_text.strip()
        if not text:
            return None
        return self._publish(
            ResolvedPlace(city=text, formatted_address=text, coordinates=None)
        )

    def clear(self) -> None:
        """Reset input, predictions, warning and selection."""
        self._cancel_debounce()
        self._invalidate()
        self._input_text = ""
        self._predictions = []
        self._selection = None
        self._warning = None
        self._state = SessionState.IDLE

        self._emit(self._on_predictions, [])
        self._emit(self._on_error, None)
        self._emit(self._on_clear)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def join(self) -> None:
        """Wait for the pending debounce timer and all in-flight lookups."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        self._cancel_debounce()
        self._invalidate()
        await self.join()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _publish(self, place: ResolvedPlace) -> ResolvedPlace | None:
        if not place.is_valid:
            self._state = SessionState.FAILED
            self._report_error(CITY_UNDETERMINED_MESSAGE)
            return None

        self._cancel_debounce()
        self._invalidate()
        self._set_predictions([])
        self._input_text = place.label
        self._selection = place.model_copy(deep=True)
        self._state = SessionState.IDLE
        self._report_error(None)

        logger.info(f"Location selected: {place.label}")
        self._emit(self._on_select, place.model_copy(deep=True))
        return place.model_copy(deep=True)

    def _invalidate(self) -> None:
        self._sequence += 1

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _set_predictions(self, items: list[PlaceCandidate]) -> None:
        if items == self._predictions:
            return
        self._predictions = list(items)
        self._emit(self._on_predictions, list(items))

    def _report_error(self, message: str | None) -> None:
        self._warning = message
        self._emit(self._on_error, message)

    def _emit(self, callback: Callable | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Location session listener raised")
