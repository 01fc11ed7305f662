#!/usr/bin/env python3
"""
Campaign persistence backends.

Both stores speak the same small protocol:
- save(record) -> bool
- load() -> record dict or None when nothing is stored
Errors from the backend propagate; Galaxy.save / Galaxy.load turn them
into a logged failure.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Protocol

import redis

from crusade.models import STORE_SETTINGS


class CampaignStore(Protocol):
    def save(self, record: dict) -> bool: ...

    def load(self) -> Optional[dict]: ...


class RedisCampaignStore:
    """
    Keeps the latest campaign record in a Redis hash. The 'data' field
    holds the JSON record, 'turn' mirrors the turn counter for quick reads.
    """

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        client: Any = None,
    ) -> None:
        self.url = url or STORE_SETTINGS.redis_url
        self.key = key or STORE_SETTINGS.campaign_key
        # decode_responses=True so we deal with str, not bytes
        self._redis = client if client is not None else redis.Redis.from_url(
            self.url, decode_responses=True
        )

    @property
    def client(self):
        return self._redis

    def close(self) -> None:
        self._redis.close()

    def save(self, record: dict) -> bool:
        mapping = {"data": json.dumps(record), "turn": str(record.get("turn", 0))}
        self._redis.hset(self.key, mapping=mapping)
        return True

    def load(self) -> Optional[dict]:
        data = self._redis.hget(self.key, "data")
        if not data:
            return None
        return json.loads(data)

    def load_turn(self) -> Optional[int]:
        turn = self._redis.hget(self.key, "turn")
        return int(turn) if turn else None

    def clear(self) -> bool:
        return bool(self._redis.delete(self.key))


class JsonFileCampaignStore:
    """Single JSON file on disk, replaced atomically on every save."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or STORE_SETTINGS.campaign_file)

    def save(self, record: dict) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(record, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
        print(f"[crusade-store] wrote {self.path}")
        return True

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            print(f"[crusade-store] no campaign at {self.path}")
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def clear(self) -> bool:
        if not self.path.exists():
            return False
        self.path.unlink()
        return True
