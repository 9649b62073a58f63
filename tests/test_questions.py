from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from litelab_engine.errors import RemoteError
from litelab_engine.runtime.config import WEEK_MS, EngineConfig
from litelab_engine.runtime.scheduler import Debouncer
from litelab_engine.services import (
    MemoryStore,
    QuestionDetail,
    SearchCache,
    SearchController,
    SearchPage,
    StackExchangeClient,
    build_lesson,
)
from litelab_engine.services.questions import (
    BASE_URL,
    STATUS_CACHED,
    STATUS_LIVE,
    STATUS_SEARCHING,
)


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code
        self.ok = status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StubSession:
    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Dict[str, str], timeout: float) -> Any:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeSearch:
    def __init__(self) -> None:
        self.queries: List[str] = []
        self.page_sizes: List[int] = []
        self.error: Optional[RemoteError] = None

    def search(self, query: str, page: int = 1, page_size: int = 10) -> SearchPage:
        self.queries.append(query)
        self.page_sizes.append(page_size)
        if self.error is not None:
            raise self.error
        return SearchPage(items=({"question_id": len(self.queries), "title": query},))

    def fetch_detail(self, question_id: int) -> QuestionDetail:
        return QuestionDetail(question={"question_id": question_id}, answers=())


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def make_controller(
    client: FakeSearch,
    *,
    store: Optional[MemoryStore] = None,
    wall: int = 1_000,
) -> tuple[SearchController, FakeClock]:
    clock = FakeClock()
    cache = SearchCache(store or MemoryStore(), clock=lambda: wall)
    controller = SearchController(
        client, Debouncer(clock=clock), cache=cache, clock=lambda: wall
    )
    return controller, clock


# -- client ------------------------------------------------------------------


def test_client_search_sends_site_and_filter() -> None:
    session = StubSession(
        FakeResponse({"items": [{"question_id": 7}], "has_more": True})
    )
    client = StackExchangeClient(session=session)

    page = client.search("flex center", page=2, page_size=5)

    assert page.items == ({"question_id": 7},)
    assert page.has_more is True
    call = session.calls[0]
    assert call["url"] == f"{BASE_URL}/search/advanced"
    assert call["params"]["site"] == "stackoverflow"
    assert call["params"]["q"] == "flex center"
    assert call["params"]["page"] == "2"
    assert call["params"]["pagesize"] == "5"


def test_client_empty_query_skips_request() -> None:
    session = StubSession()

    page = StackExchangeClient(session=session).search("   ")

    assert page == SearchPage()
    assert session.calls == []


def test_client_http_error_becomes_remote_error() -> None:
    session = StubSession(FakeResponse({}, status_code=502))

    with pytest.raises(RemoteError) as info:
        StackExchangeClient(session=session).search("grid")

    assert info.value.status == 502


def test_client_network_error_becomes_remote_error() -> None:
    session = StubSession(requests.ConnectionError("offline"))

    with pytest.raises(RemoteError):
        StackExchangeClient(session=session).search("grid")


def test_client_invalid_json_becomes_remote_error() -> None:
    session = StubSession(FakeResponse(ValueError("not json")))

    with pytest.raises(RemoteError):
        StackExchangeClient(session=session).search("grid")


def test_client_fetch_detail_loads_question_and_answers() -> None:
    session = StubSession(
        FakeResponse({"items": [{"question_id": 3, "body": "<p>q</p>"}]}),
        FakeResponse({"items": [{"answer_id": 1}, {"answer_id": 2}]}),
    )

    detail = StackExchangeClient(session=session).fetch_detail(3)

    assert detail.question["body"] == "<p>q</p>"
    assert len(detail.answers) == 2
    assert session.calls[1]["url"].endswith("/questions/3/answers")
    assert session.calls[1]["params"]["sort"] == "votes"


def test_client_fetch_detail_missing_question() -> None:
    session = StubSession(FakeResponse({"items": []}))

    with pytest.raises(RemoteError) as info:
        StackExchangeClient(session=session).fetch_detail(99)

    assert info.value.status == 404


# -- controller --------------------------------------------------------------


def test_controller_debounces_typing() -> None:
    client = FakeSearch()
    controller, clock = make_controller(client)

    controller.set_query("fl")
    clock.advance(300)
    controller.set_query("flex")
    clock.advance(499)
    controller.debouncer.process_due()
    assert client.queries == []

    clock.advance(1)
    controller.debouncer.process_due()
    assert client.queries == ["flex"]
    assert controller.status == STATUS_LIVE


def test_controller_uses_fresh_cache() -> None:
    store = MemoryStore()
    client = FakeSearch()
    first, _ = make_controller(client, store=store, wall=1_000)
    first.run("flex")

    second, _ = make_controller(client, store=store, wall=1_000 + WEEK_MS - 1)
    results = second.run("flex")

    assert client.queries == ["flex"]
    assert second.status == STATUS_CACHED
    assert second.cache_hit is True
    assert results[0]["title"] == "flex"


def test_controller_ignores_expired_cache() -> None:
    store = MemoryStore()
    client = FakeSearch()
    first, _ = make_controller(client, store=store, wall=1_000)
    first.run("flex")

    expired, _ = make_controller(client, store=store, wall=1_000 + WEEK_MS)
    expired.run("flex")

    assert client.queries == ["flex", "flex"]
    assert expired.status == STATUS_LIVE


def test_controller_discards_stale_responses() -> None:
    controller, _ = make_controller(FakeSearch())

    older = controller.submit("flex")
    newer = controller.submit("grid")
    assert older is not None and newer is not None
    assert controller.status == STATUS_SEARCHING

    assert controller.complete(newer, "grid", SearchPage(items=({"title": "grid"},)))
    assert not controller.complete(older, "flex", SearchPage(items=({"title": "flex"},)))

    assert [item["title"] for item in controller.results] == ["grid"]


def test_controller_reports_remote_errors() -> None:
    client = FakeSearch()
    client.error = RemoteError("Stack API 503", status=503)
    controller, _ = make_controller(client)

    results = controller.run("flex")

    assert results == []
    assert controller.status == "Stack API 503"
    assert controller.loading is False


def test_controller_empty_query_clears_results() -> None:
    controller, _ = make_controller(FakeSearch())
    controller.run("flex")

    assert controller.run("  ") == []


def test_controller_open_detail() -> None:
    controller, _ = make_controller(FakeSearch())

    detail = controller.open_detail(12)

    assert detail is not None
    assert controller.picked == detail


# -- lessons -----------------------------------------------------------------


def test_build_lesson_carries_attribution() -> None:
    question = {"question_id": 5, "title": "Center a div", "link": "https://so/q/5"}

    lesson = build_lesson(question, 42)

    assert lesson["id"] == "lesson-5-42"
    assert lesson["attribution"] == {
        "source": "Stack Overflow / Stack Exchange API",
        "license": "CC BY-SA 4.0",
        "link": "https://so/q/5",
    }
    assert lesson["items"] == [{"question": question}]


def test_controller_from_config_honors_env_overrides() -> None:
    config = EngineConfig.from_env(
        {
            "LITELAB_ENGINE_SEARCH_DELAY_MS": "250",
            "LITELAB_ENGINE_SEARCH_PAGE_SIZE": "3",
            "LITELAB_ENGINE_CACHE_TTL_MS": "60000",
        }
    )
    client = FakeSearch()
    clock = FakeClock()
    controller = SearchController.from_config(client, Debouncer(clock=clock), config)

    controller.set_query("grid gap")
    clock.advance(249)
    controller.debouncer.process_due()
    assert client.queries == []

    clock.advance(1)
    controller.debouncer.process_due()

    assert client.queries == ["grid gap"]
    assert client.page_sizes == [3]
    assert controller.ttl_ms == 60_000
