from collections import deque
from datetime import datetime
from typing import Deque, List, Union
from app.schemas.bridge import QueryLogEntry, QueryType

class QueryLog:
    """
    Кольцевой журнал запросов для диагностики.

    Хранит последние `capacity` записей, новая запись всегда первая,
    самая старая вытесняется.
    """

    def __init__(self, capacity: int = 30):
        if capacity < 1:
            raise ValueError("Query log capacity must be positive")
        self.capacity = capacity
        self._entries: Deque[QueryLogEntry] = deque(maxlen=capacity)

    def record(self, type: Union[QueryType, str], query: str) -> QueryLogEntry:
        entry = QueryLogEntry(
            timestamp=datetime.now(),
            query=query,
            type=QueryType(type)
        )
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> List[QueryLogEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
