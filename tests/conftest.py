# tests/conftest.py
"""
Pytest configuration and in-memory fakes for the Weave service.

The fakes stand in for the network services the code talks to:
- FakeSupabase: the subset of the supabase-py query builder the repositories use
- FakeVectorStore: a Pinecone index with cosine similarity and metadata filters
- FakeEmbedder: deterministic bag-of-words embeddings
- FakeAnthropic: scripted Claude responses
"""

import copy
import hashlib
import math
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from weave.features.database import DatabaseClient
from weave.features.memory import PineconeMemorySystem


# =============================================================================
# SUPABASE
# =============================================================================

class FakeQuery:
    def __init__(self, store: Dict[str, List[Dict]], table: str):
        self.store = store
        self.table_name = table
        self.filters = []
        self.action = "select"
        self.payload = None
        self.order_by = None
        self.limit_count = None

    @property
    def rows(self) -> List[Dict]:
        return self.store.setdefault(self.table_name, [])

    def select(self, columns="*"):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matching(self) -> List[Dict]:
        return [row for row in self.rows if all(f(row) for f in self.filters)]

    def execute(self):
        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {"id": str(uuid.uuid4()), **copy.deepcopy(payload)}
                self.rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted)

        matching = self._matching()

        if self.action == "update":
            for row in matching:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(matching))

        if self.action == "delete":
            self.store[self.table_name] = [row for row in self.rows if row not in matching]
            return SimpleNamespace(data=copy.deepcopy(matching))

        if self.order_by:
            column, desc = self.order_by
            matching = sorted(matching, key=lambda row: row.get(column) or "", reverse=desc)
        if self.limit_count is not None:
            matching = matching[:self.limit_count]
        return SimpleNamespace(data=copy.deepcopy(matching))


class FakeSupabase:
    def __init__(self):
        self.store: Dict[str, List[Dict]] = {}
        self.rpc_calls: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.store, name)

    def rows(self, name: str) -> List[Dict]:
        return self.store.get(name, [])

    def rpc(self, name: str, params: Dict[str, Any]):
        self.rpc_calls.append((name, params))
        return FakeRpc(RPC_FUNCTIONS[name](self.store, params))


class FakeRpc:
    def __init__(self, data):
        self.data = data

    def execute(self):
        return SimpleNamespace(data=self.data)


def _increment_memory_access(store: Dict[str, List[Dict]], params: Dict[str, Any]) -> int:
    """Mirrors sql/increment_memory_access.sql."""
    now = datetime.now(timezone.utc).isoformat()
    updated = 0
    for row in store.get("memories", []):
        if row.get("user_id") == params["p_user_id"] and row.get("content_hash") in params["p_content_hashes"]:
            row["access_count"] = (row.get("access_count") or 0) + 1
            row["last_accessed_at"] = now
            updated += 1
    return updated


RPC_FUNCTIONS = {
    "increment_memory_access": _increment_memory_access,
}


# =============================================================================
# PINECONE
# =============================================================================

def _cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


def _matches_condition(value: Any, condition: Any) -> bool:
    if not isinstance(condition, dict):
        condition = {"$eq": condition}

    values = value if isinstance(value, list) else [value]
    for op, expected in condition.items():
        if op == "$eq" and expected not in values:
            return False
        if op == "$ne" and expected in values:
            return False
        if op == "$in" and not any(v in expected for v in values):
            return False
        if op == "$nin" and any(v in expected for v in values):
            return False
        if op == "$gte" and (value is None or value < expected):
            return False
        if op == "$lte" and (value is None or value > expected):
            return False
    return True


def matches_filter(metadata: Dict[str, Any], search_filter: Optional[Dict[str, Any]]) -> bool:
    """Evaluate a Pinecone metadata filter."""
    for key, condition in (search_filter or {}).items():
        if key == "$or":
            if not any(matches_filter(metadata, sub) for sub in condition):
                return False
        elif key == "$and":
            if not all(matches_filter(metadata, sub) for sub in condition):
                return False
        elif key not in metadata or not _matches_condition(metadata[key], condition):
            return False
    return True


class FakeVectorStore:
    def __init__(self, configured: bool = True):
        self.configured = configured
        self.vectors: Dict[str, Dict[str, Any]] = {}
        self.queries: List[Dict[str, Any]] = []
        self.ensure_calls = 0

    @property
    def is_configured(self) -> bool:
        return self.configured

    def ensure_index(self) -> None:
        self.ensure_calls += 1

    def upsert(self, vector_id, values, metadata) -> None:
        self.vectors[vector_id] = {"values": list(values), "metadata": copy.deepcopy(metadata)}

    def query(self, vector, filter, top_k=10):
        self.queries.append({"vector": vector, "filter": filter, "top_k": top_k})
        scored = [
            {"id": vid, "score": _cosine(vector, v["values"]), "metadata": copy.deepcopy(v["metadata"])}
            for vid, v in self.vectors.items()
            if matches_filter(v["metadata"], filter)
        ]
        scored.sort(key=lambda m: m["score"], reverse=True)
        return scored[:top_k]

    def delete(self, vector_ids) -> None:
        for vid in vector_ids:
            self.vectors.pop(vid, None)


# =============================================================================
# EMBEDDINGS
# =============================================================================

EMBEDDING_DIMENSIONS = 32


class FakeEmbedder:
    """Hashes words into a small vector; shared words mean higher similarity."""

    def __init__(self):
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        vector = [0.0] * EMBEDDING_DIMENSIONS
        for word in text.lower().split():
            bucket = int(hashlib.md5(word.strip(".,!?").encode()).hexdigest(), 16) % EMBEDDING_DIMENSIONS
            vector[bucket] += 1.0
        if not any(vector):
            vector[0] = 1.0
        return vector


# =============================================================================
# ANTHROPIC
# =============================================================================

def text_response(text: str):
    return SimpleNamespace(
        stop_reason="end_turn",
        content=[SimpleNamespace(type="text", text=text)],
    )


def tool_use_response(name: str, tool_input: Dict[str, Any], tool_id: str = "toolu_1"):
    return SimpleNamespace(
        stop_reason="tool_use",
        content=[SimpleNamespace(type="tool_use", id=tool_id, name=name, input=tool_input)],
    )


class FakeMessages:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        call = dict(kwargs)
        call["messages"] = list(kwargs.get("messages", []))
        self.calls.append(call)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class FakeAnthropic:
    def __init__(self, responses):
        self.messages = FakeMessages(responses)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def db(supabase):
    return DatabaseClient(client=supabase)


@pytest.fixture
def vector_store():
    return FakeVectorStore()


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def memory_system(db, vector_store, embedder):
    return PineconeMemorySystem(db=db, vector_store=vector_store, embedder=embedder)


@pytest.fixture
def user_id(supabase):
    """A user row in humanized mode."""
    supabase.table("users").insert({"id": "user-1", "email": "ada@example.com", "memory_mode": "humanized"}).execute()
    return "user-1"
