import threading

from property_agent.models import Action, SearchFilter
from property_agent.state import ConversationStateStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_remember_and_get_returns_copy():
    store = ConversationStateStore()
    filters = SearchFilter(location="Miami", bedrooms=3)
    assert store.remember(filters, "s1")

    got = store.get("s1")
    assert got == filters
    got.location = "Austin"
    assert store.get("s1").location == "Miami"


def test_filters_without_criteria_are_not_stored():
    store = ConversationStateStore()
    assert not store.remember(SearchFilter(), "s1")
    assert not store.remember(SearchFilter(min_price=100000), "s1")
    assert not store.remember(SearchFilter(action=Action.SAVED), "s1")
    assert store.get("s1") is None


def test_sessions_are_isolated():
    store = ConversationStateStore()
    store.remember(SearchFilter(location="Miami"), "alice")
    store.remember(SearchFilter(location="Austin"), "bob")
    assert store.get("alice").location == "Miami"
    assert store.get("bob").location == "Austin"
    assert store.get("carol") is None


def test_missing_session_id_uses_default_slot():
    store = ConversationStateStore()
    store.remember(SearchFilter(bedrooms=2))
    assert store.get(None) == SearchFilter(bedrooms=2)
    assert store.get("default") == SearchFilter(bedrooms=2)


def test_entries_expire_after_ttl():
    clock = FakeClock()
    store = ConversationStateStore(ttl_seconds=60, clock=clock)
    store.remember(SearchFilter(location="Miami"), "s1")

    clock.now = 59
    assert store.get("s1") is not None
    clock.now = 61
    assert store.get("s1") is None
    assert len(store) == 0


def test_oldest_session_is_evicted():
    store = ConversationStateStore(max_sessions=2)
    store.remember(SearchFilter(location="Miami"), "a")
    store.remember(SearchFilter(location="Austin"), "b")
    store.get("a")  # a is now the most recently used
    store.remember(SearchFilter(location="Boston"), "c")

    assert store.get("b") is None
    assert store.get("a").location == "Miami"
    assert store.get("c").location == "Boston"


def test_forget_and_clear():
    store = ConversationStateStore()
    store.remember(SearchFilter(location="Miami"), "a")
    store.remember(SearchFilter(location="Austin"), "b")
    store.forget("a")
    assert store.get("a") is None
    store.clear()
    assert len(store) == 0


def test_len_is_consistent_under_concurrent_writes():
    store = ConversationStateStore(max_sessions=10_000)

    def worker(offset):
        for i in range(200):
            store.remember(SearchFilter(bedrooms=i), f"s{offset}-{i}")
            len(store)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store) == 800
