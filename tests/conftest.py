"""Shared fixtures: form builders and an in-memory Redis client."""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Set

import pytest

from formkit.models.requests import CreateFormRequest
from formkit.services.form_store import DELETE_FORM_SCRIPT, PUSH_ANSWER_SCRIPT
from formkit.services.normalizer import normalize_form


class MockScript:
    """Registered Lua script; runs its Python equivalent without yielding."""

    def __init__(self, client: "MockRedisClient", body):
        self.client = client
        self.body = body

    async def __call__(self, keys=None, args=None):
        await self.client._tick()
        self.client.calls.append("evalsha")
        return self.body(list(keys or []), list(args or []))


class MockRedisClient:
    """In-memory stand-in for the async Redis client used by FormStore.

    With ``interleave=True`` every command yields to the event loop first,
    so coroutines run through ``asyncio.gather`` interleave between commands.
    """

    def __init__(self, interleave: bool = False):
        self.strings: Dict[str, str] = {}
        self.lists: Dict[str, List[str]] = {}
        self.sets: Dict[str, Set[str]] = {}
        self.calls: List[str] = []
        self.interleave = interleave

    async def _tick(self) -> None:
        if self.interleave:
            await asyncio.sleep(0)

    def register_script(self, script: str) -> MockScript:
        bodies = {
            PUSH_ANSWER_SCRIPT: self._push_answer,
            DELETE_FORM_SCRIPT: self._delete_form,
        }
        return MockScript(self, bodies[script])

    def _push_answer(self, keys: List[str], args: List[str]) -> int:
        form_key, answers_key = keys
        if form_key not in self.strings:
            return -1
        self.lists.setdefault(answers_key, []).append(args[0])
        return len(self.lists[answers_key])

    def _delete_form(self, keys: List[str], args: List[str]) -> int:
        form_key, answers_key, owner_key = keys
        if form_key not in self.strings:
            return -1
        count = len(self.lists.pop(answers_key, []))
        del self.strings[form_key]
        self.sets.get(owner_key, set()).discard(args[0])
        return count

    async def ping(self) -> bool:
        return True

    async def set(self, key: str, value: str) -> bool:
        await self._tick()
        self.calls.append("set")
        self.strings[key] = value
        return True

    async def get(self, key: str) -> Optional[str]:
        await self._tick()
        return self.strings.get(key)

    async def exists(self, key: str) -> int:
        await self._tick()
        return int(key in self.strings or key in self.lists or key in self.sets)

    async def delete(self, *keys: str) -> int:
        await self._tick()
        self.calls.append("delete")
        removed = 0
        for key in keys:
            for store in (self.strings, self.lists, self.sets):
                if key in store:
                    del store[key]
                    removed += 1
        return removed

    async def rpush(self, key: str, *values: str) -> int:
        await self._tick()
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    async def lrange(self, key: str, start: int, end: int) -> List[str]:
        await self._tick()
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    async def llen(self, key: str) -> int:
        await self._tick()
        return len(self.lists.get(key, []))

    async def sadd(self, key: str, *members: str) -> int:
        await self._tick()
        bucket = self.sets.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    async def srem(self, key: str, *members: str) -> int:
        await self._tick()
        bucket = self.sets.get(key, set())
        removed = len(bucket & set(members))
        bucket.difference_update(members)
        return removed

    async def smembers(self, key: str) -> Set[str]:
        await self._tick()
        return set(self.sets.get(key, set()))


def build_form(fields, title="Survey", owner_email="owner@example.com", form_id="F1", **extra):
    """Normalize a form from raw field descriptors, as the API does."""
    request = CreateFormRequest.model_validate(
        {"title": title, "formFields": fields, **extra}
    )
    return normalize_form(
        request,
        owner_email=owner_email,
        form_id=form_id,
        now=datetime(2026, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def mock_redis():
    return MockRedisClient()


@pytest.fixture
def full_name_form():
    return build_form([
        {"id": "f1", "label": "Full Name", "fieldType": "text", "required": True, "min": 3, "max": 20},
    ])


@pytest.fixture
def mixed_form():
    """One field of every type, in a fixed order."""
    return build_form([
        {"id": "f1", "label": "Full Name", "fieldType": "text", "required": True, "min": 2, "max": 30},
        {"id": "f2", "label": "About You", "fieldType": "textarea", "max": 100},
        {"id": "f3", "label": "Email", "fieldType": "email", "required": True, "regexp": r"^[^@\s]+@[^@\s]+$"},
        {"id": "f4", "label": "Age", "fieldType": "number", "min": 18, "max": 99},
        {"id": "f5", "label": "Start Date", "fieldType": "date", "min": "2026-01-01", "max": "2026-12-31"},
        {"id": "f6", "label": "Subscribe", "fieldType": "radio", "required": True, "options": ["Yes", "No"]},
        {"id": "f7", "label": "Topics", "fieldType": "checkbox", "options": ["News", "Sport", "Tech"]},
    ])
