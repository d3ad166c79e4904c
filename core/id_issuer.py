# -*- coding: utf-8 -*-
"""
Identifier issuers. Store, editor and director receive one of these instead
of calling uuid directly, so tests can swap in a deterministic sequence.
"""
import itertools
import uuid


class UuidIssuer:
    """Random UUID4 strings, the same ids the browser version produced."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIds:
    """Deterministic ids: '<prefix>-1', '<prefix>-2', ..."""

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
