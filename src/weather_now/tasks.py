# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
tasks.py — Request supersession and debouncing for interactive lookups.

Every request takes a RequestToken from a RequestGate. Starting a newer
request (or tearing the gate down) makes older tokens stale, and results
belonging to a stale token are dropped. The underlying HTTP call is not
aborted; its answer is simply ignored when it arrives.

SuggestionSearch ties the two together for type-ahead search: each keystroke
restarts a timer, only the last timer fires a request, and only the latest
request may publish suggestions.

PlaceLookup does the same for submitted queries: only the latest submit
delivers a place or suggestions.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from weather_now.coords import parse_coordinates
from weather_now.geocode import search_places
from weather_now.models import PlaceCandidate
from weather_now.reverse import DEFAULT_NEARBY_COUNT
from weather_now.utils import ProviderError

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_MIN_CHARS = 2
DEFAULT_SUGGESTION_COUNT = 6

logger = logging.getLogger(__name__)


class RequestToken:
    """Handle for one request issued through a RequestGate."""

    def __init__(self, gate: "RequestGate", generation: int):
        self._gate = gate
        self.generation = generation
        self._cancelled = False

    @property
    def is_current(self) -> bool:
        """True while no newer request has started and nobody cancelled this one."""
        return not self._cancelled and self._gate.generation == self.generation

    def cancel(self) -> None:
        self._cancelled = True


class RequestGate:
    """Hands out tokens; the most recently started request is the only live one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self) -> RequestToken:
        """Start a new request, superseding every earlier token."""
        with self._lock:
            self._generation += 1
            return RequestToken(self, self._generation)

    def invalidate(self) -> None:
        """Make every outstanding token stale without starting a new request."""
        with self._lock:
            self._generation += 1


class Debouncer:
    """Run `fn` only after `delay` seconds pass without another call.

    Args:
        delay: Quiet period in seconds.
        fn: Callable invoked (on a timer thread) with the last call's arguments.
    """

    def __init__(self, delay: float, fn: Callable[..., Any]):
        self.delay = delay
        self.fn = fn
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self.fn, args=args, kwargs=kwargs)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class SuggestionSearch:
    """Debounced, supersession-aware type-ahead search.

    Args:
        search_fn: ``search_places``-compatible callable (query, count=...).
        on_results: Receives the suggestion list of the latest request.
        delay: Debounce delay in seconds.
        min_chars: Queries shorter than this clear the suggestions instead
            of searching.
        count: Number of suggestions to ask for.
    """

    def __init__(
        self,
        search_fn: Callable[..., list[PlaceCandidate]],
        on_results: Callable[[list[PlaceCandidate]], None],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        min_chars: int = DEFAULT_MIN_CHARS,
        count: int = DEFAULT_SUGGESTION_COUNT,
    ):
        self.search_fn = search_fn
        self.on_results = on_results
        self.min_chars = min_chars
        self.count = count
        self.gate = RequestGate()
        self._debouncer = Debouncer(delay, self.run)

    def update(self, query: str) -> None:
        """Register the latest text in the search box.

        Any request already in flight belongs to older text and is made stale.
        """
        self.gate.invalidate()
        if not query or len(query) < self.min_chars:
            self._debouncer.cancel()
            self.on_results([])
            return
        self._debouncer(query)

    def run(self, query: str) -> list[PlaceCandidate] | None:
        """Search now; publish and return results unless superseded meanwhile.

        Returns:
            The suggestions, or None when a newer request made these stale.
        """
        token = self.gate.begin()
        try:
            results = self.search_fn(query, count=self.count)
        except ProviderError as e:
            logger.warning("Suggestion search for %r failed: %s", query, e)
            results = []

        if not token.is_current:
            logger.debug("Dropping stale suggestions for %r", query)
            return None
        self.on_results(results)
        return results

    def close(self) -> None:
        """Tear down: stop the pending timer and ignore in-flight answers."""
        self._debouncer.cancel()
        self.gate.invalidate()


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one submitted query.

    `place` is set when the text was a coordinate pair (with its nearby
    alternatives); otherwise `suggestions` holds the name-search matches.
    """

    place: PlaceCandidate | None = None
    nearby: tuple[PlaceCandidate, ...] = ()
    suggestions: tuple[PlaceCandidate, ...] = ()


class PlaceLookup:
    """Turns submitted search text into a place or a list of suggestions.

    Coordinates go to reverse resolution, anything else to name search.
    Each submit takes a token from `gate`; when a newer submit (or a
    selection calling `cancel`) started meanwhile, the result is dropped.

    Args:
        resolver: A ReverseResolver.
        search_fn: ``search_places``-compatible callable.
        count: Suggestions per name search.
        language: Language for name-search results.
        min_chars: Shorter text yields no suggestions and no request.
        nearby_count: Alternatives gathered for a coordinate lookup.
    """

    def __init__(
        self,
        resolver: Any,
        search_fn: Callable[..., list[PlaceCandidate]] = search_places,
        count: int = DEFAULT_SUGGESTION_COUNT,
        language: str = "en",
        min_chars: int = DEFAULT_MIN_CHARS,
        nearby_count: int = DEFAULT_NEARBY_COUNT,
    ):
        self.resolver = resolver
        self.search_fn = search_fn
        self.count = count
        self.language = language
        self.min_chars = min_chars
        self.nearby_count = nearby_count
        self.gate = RequestGate()

    def submit(self, text: str) -> LookupResult | None:
        """Look up `text`.

        Returns:
            The result, or None when a newer submit superseded this one.
        """
        token = self.gate.begin()
        result = self._lookup(text.strip())
        if not token.is_current:
            logger.debug("Dropping superseded lookup for %r", text)
            return None
        return result

    def cancel(self) -> None:
        """Ignore whatever lookup is still running."""
        self.gate.invalidate()

    def _lookup(self, text: str) -> LookupResult:
        coord = parse_coordinates(text)
        if coord is not None:
            best, alternatives = self.resolver.resolve_with_nearby(
                coord.latitude, coord.longitude, count=self.nearby_count
            )
            return LookupResult(place=best, nearby=tuple(alternatives))

        if len(text) < self.min_chars:
            return LookupResult()
        try:
            found = self.search_fn(text, count=self.count, language=self.language)
        except ProviderError as e:
            logger.warning("Name search for %r failed: %s", text, e)
            found = []
        return LookupResult(suggestions=tuple(found))
