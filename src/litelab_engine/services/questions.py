"""Question search against the Stack Exchange API, with caching and lessons."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

import requests

from litelab_engine.errors import RemoteError, StorageError
from litelab_engine.runtime import telemetry
from litelab_engine.runtime.config import WEEK_MS, EngineConfig
from litelab_engine.runtime.scheduler import Debouncer

from .storage import SearchCache, wall_clock_ms

BASE_URL = "https://api.stackexchange.com/2.3"
SITE = "stackoverflow"
SEARCH_FILTER = "!-*f(6rc.lF)"
DETAIL_FILTER = "withbody"
CHANNEL = "search"

STATUS_IDLE = ""
STATUS_SEARCHING = "Searching..."
STATUS_CACHED = "Showing cached results"
STATUS_LIVE = "Live results"

LICENSE = "CC BY-SA 4.0"
ATTRIBUTION_SOURCE = "Stack Overflow / Stack Exchange API"

Question = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class SearchPage:
    items: tuple[Question, ...] = ()
    has_more: bool = False


@dataclass(frozen=True, slots=True)
class QuestionDetail:
    question: Question
    answers: tuple[Question, ...] = field(default=())


class QuestionSearch(Protocol):
    def search(self, query: str, page: int = 1, page_size: int = 10) -> SearchPage:
        """Return one page of matching questions; raise RemoteError on failure."""
        ...

    def fetch_detail(self, question_id: int) -> QuestionDetail:
        """Return the question with body and its top answers."""
        ...


class StackExchangeClient:
    """Thin ``requests`` client for the public Stack Exchange API."""

    def __init__(
        self,
        *,
        base_url: str = BASE_URL,
        site: str = SITE,
        timeout: float = 10.0,
        session: Optional[Any] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.site = site
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{path}"
        query = {key: str(value) for key, value in params.items()}
        query["site"] = self.site
        query.setdefault("filter", "default")
        try:
            resp = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteError(f"Stack API request failed: {exc}") from exc
        if not resp.ok:
            raise RemoteError(f"Stack API {resp.status_code}", status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise RemoteError(
                "Stack API returned invalid JSON", status=resp.status_code
            ) from exc
        if not isinstance(data, dict):
            raise RemoteError("Unexpected Stack API response", status=resp.status_code)
        return data

    def search(self, query: str, page: int = 1, page_size: int = 10) -> SearchPage:
        if not query or not query.strip():
            return SearchPage()
        with telemetry.span(
            "questions::search", component="questions", metadata={"page": page}
        ):
            data = self._get(
                "search/advanced",
                {
                    "q": query,
                    "page": page,
                    "pagesize": page_size,
                    "order": "desc",
                    "sort": "relevance",
                    "filter": SEARCH_FILTER,
                },
            )
        return SearchPage(
            items=tuple(data.get("items") or ()),
            has_more=bool(data.get("has_more", False)),
        )

    def fetch_detail(self, question_id: int) -> QuestionDetail:
        with telemetry.span(
            "questions::detail",
            component="questions",
            metadata={"question_id": question_id},
        ):
            data = self._get(
                f"questions/{question_id}",
                {"filter": DETAIL_FILTER, "page": 1, "pagesize": 1, "order": "desc"},
            )
            items = data.get("items") or []
            if not items:
                raise RemoteError(f"Question {question_id} not found", status=404)
            answers = self._get(
                f"questions/{question_id}/answers",
                {
                    "filter": DETAIL_FILTER,
                    "page": 1,
                    "pagesize": 10,
                    "order": "desc",
                    "sort": "votes",
                },
            )
        return QuestionDetail(
            question=items[0], answers=tuple(answers.get("items") or ())
        )


def build_lesson(question: Question, now_ms: Optional[int] = None) -> Dict[str, Any]:
    """Package a question as a lesson record with CC BY-SA attribution."""

    if now_ms is None:
        now_ms = wall_clock_ms()
    return {
        "id": f"lesson-{question.get('question_id')}-{now_ms}",
        "title": question.get("title", ""),
        "items": [{"question": dict(question)}],
        "attribution": {
            "source": ATTRIBUTION_SOURCE,
            "license": LICENSE,
            "link": question.get("link"),
        },
        "createdAt": now_ms,
    }


ResultsListener = Callable[[Sequence[Question]], None]


class SearchController:
    """Debounced query entry in front of a ``QuestionSearch`` and its cache.

    Every live request gets an increasing id; a completion whose id is older
    than the latest issued one is discarded.
    """

    def __init__(
        self,
        client: QuestionSearch,
        debouncer: Debouncer,
        *,
        cache: Optional[SearchCache] = None,
        clock: Callable[[], int] = wall_clock_ms,
        delay_ms: int = 500,
        page_size: int = 10,
        ttl_ms: int = WEEK_MS,
        on_results: Optional[ResultsListener] = None,
    ) -> None:
        self._client = client
        self.debouncer = debouncer
        self._cache = cache
        self._clock = clock
        self.delay_ms = delay_ms
        self.page_size = page_size
        self.ttl_ms = ttl_ms
        self._on_results = on_results
        self.query = ""
        self.results: List[Question] = []
        self.status = STATUS_IDLE
        self.loading = False
        self.cache_hit = False
        self.picked: Optional[QuestionDetail] = None
        self._latest_request = 0

    @classmethod
    def from_config(
        cls,
        client: QuestionSearch,
        debouncer: Debouncer,
        config: EngineConfig,
        *,
        cache: Optional[SearchCache] = None,
        clock: Callable[[], int] = wall_clock_ms,
        on_results: Optional[ResultsListener] = None,
    ) -> "SearchController":
        return cls(
            client,
            debouncer,
            cache=cache,
            clock=clock,
            delay_ms=config.search_delay_ms,
            page_size=config.search_page_size,
            ttl_ms=config.cache_ttl_ms,
            on_results=on_results,
        )

    @property
    def latest_request(self) -> int:
        return self._latest_request

    @property
    def pending(self) -> bool:
        return self.debouncer.is_pending(CHANNEL)

    def set_query(self, query: str) -> None:
        """Record typed text; the search runs once typing pauses."""

        self.query = query
        self.debouncer.schedule(CHANNEL, lambda: self.run(query), self.delay_ms)

    def cancel(self) -> None:
        self.debouncer.cancel(CHANNEL)

    def submit(self, query: str) -> Optional[int]:
        """Start a search; return a request id when a live fetch is needed.

        Empty queries clear the results and cache hits are applied at once;
        both return None.
        """

        self.debouncer.cancel(CHANNEL)
        self._latest_request += 1
        if not query.strip():
            self.loading = False
            self.status = STATUS_IDLE
            self._apply([], cached=False)
            return None

        cached = self._lookup(query)
        if cached is not None:
            self.loading = False
            self.status = STATUS_CACHED
            self._apply(cached, cached=True)
            return None

        self.loading = True
        self.status = STATUS_SEARCHING
        return self._latest_request

    def complete(self, request_id: int, query: str, page: SearchPage) -> bool:
        """Apply a live result; False if a newer request has been issued."""

        if request_id != self._latest_request:
            telemetry.record_event(
                "search.stale_discarded",
                level="debug",
                data={"request": request_id, "latest": self._latest_request},
            )
            return False
        self.loading = False
        self.status = STATUS_LIVE
        self._apply(list(page.items), cached=False)
        self._store(query, page.items)
        return True

    def fail(self, request_id: int, exc: BaseException) -> bool:
        if request_id != self._latest_request:
            return False
        telemetry.record_failure(
            "search.failed", exc, data={"request": request_id}
        )
        self.loading = False
        self.status = str(exc) or "Search failed"
        return True

    def run(self, query: Optional[str] = None) -> List[Question]:
        """Search synchronously through the client and return the results."""

        text = self.query if query is None else query
        request_id = self.submit(text)
        if request_id is None:
            return self.results
        try:
            page = self._client.search(text, 1, self.page_size)
        except RemoteError as exc:
            self.fail(request_id, exc)
            return self.results
        self.complete(request_id, text, page)
        return self.results

    def open_detail(self, question_id: int) -> Optional[QuestionDetail]:
        self.loading = True
        try:
            self.picked = self._client.fetch_detail(question_id)
        except RemoteError as exc:
            telemetry.record_failure(
                "search.detail_failed", exc, data={"question_id": question_id}
            )
            self.status = str(exc) or "Failed to load question details"
            return None
        finally:
            self.loading = False
        return self.picked

    def _lookup(self, query: str) -> Optional[List[Question]]:
        if self._cache is None:
            return None
        try:
            entry = self._cache.get_cached_search(query)
        except StorageError as exc:
            telemetry.record_failure("search.cache_read_failed", exc)
            return None
        if entry is None or not entry.is_fresh(self._clock(), ttl_ms=self.ttl_ms):
            return None
        return list(entry.items)

    def _store(self, query: str, items: Sequence[Question]) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set_cached_search(query, [dict(item) for item in items])
        except StorageError as exc:
            telemetry.record_failure("search.cache_write_failed", exc)

    def _apply(self, items: List[Question], *, cached: bool) -> None:
        self.results = items
        self.cache_hit = cached
        if self._on_results is None:
            return
        try:
            self._on_results(items)
        except Exception as exc:
            telemetry.record_failure("search.listener_failed", exc)


__all__ = [
    "QuestionSearch",
    "SearchPage",
    "QuestionDetail",
    "StackExchangeClient",
    "SearchController",
    "build_lesson",
    "BASE_URL",
    "STATUS_SEARCHING",
    "STATUS_CACHED",
    "STATUS_LIVE",
]
