import pytest

from semantic_search.config import SearchConfig
from semantic_search.indexing import Indexer
from semantic_search.search import SemanticSearchEngine
from semantic_search.storage import InMemoryChunkStore, InMemoryDocumentStore

# Each axis counts mentions of any of its keywords.
KEYWORD_AXES: list[tuple[str, ...]] = [
    ("cat", "feline", "kitten"),
    ("dog", "puppy", "canine"),
    ("engine", "car", "wheel"),
    ("pet",),
]


class KeywordEmbedder:
    """Deterministic embedder: one dimension per keyword group."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def generate(self, text: str) -> list[float]:
        self.calls.append(text)
        lowered = text.lower()
        return [
            float(sum(lowered.count(keyword) for keyword in axis))
            for axis in KEYWORD_AXES
        ]


class FailingEmbedder:
    """Succeeds for the first *succeed* calls, then raises."""

    def __init__(self, succeed: int = 0, error: Exception | None = None) -> None:
        self.succeed = succeed
        self.error = error or RuntimeError("provider unavailable")
        self.calls = 0

    async def generate(self, text: str) -> list[float]:
        self.calls += 1
        if self.calls > self.succeed:
            raise self.error
        return [1.0, 0.0, 0.0, 0.0]


@pytest.fixture()
def config() -> SearchConfig:
    return SearchConfig(api_key="test-key", similarity_threshold=0.5)


@pytest.fixture()
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def chunks() -> InMemoryChunkStore:
    return InMemoryChunkStore()


@pytest.fixture()
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture()
def indexer(documents, chunks, embedder, config) -> Indexer:
    return Indexer(documents, chunks, embedder, config=config)


@pytest.fixture()
def engine(documents, chunks, embedder, config) -> SemanticSearchEngine:
    return SemanticSearchEngine(documents, chunks, embedder, config=config)
