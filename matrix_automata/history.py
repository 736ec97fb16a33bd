"""журнал трассировки pda: одна запись на каждый видимый снаружи переход"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from .grammar import Symbol


@dataclass(frozen=True)
class HistoryEntry:
    input_label: str                 # текущий lookahead ("LEX" пока идёт лексический анализ)
    action_label: str
    stack_snapshot: Tuple[str, ...]  # от дна к вершине

    @property
    def stack_text(self) -> str:
        return " ".join(self.stack_snapshot) if self.stack_snapshot else "empty"


class HistoryLog:

    def __init__(self):
        self._entries: List[HistoryEntry] = []

    def clear(self) -> None:
        self._entries.clear()

    def append(self, input_label: str, action_label: str, stack: Sequence[Symbol]) -> HistoryEntry:
        entry = HistoryEntry(input_label, action_label, tuple(s.value for s in stack))
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, i: int) -> HistoryEntry:
        return self._entries[i]
