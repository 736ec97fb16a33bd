"""
печать снимков движка таблицами (tabulate) и сохранение отчёта в markdown.
только читает EngineSnapshot, на разбор не влияет.
"""

from typing import List, Sequence, Tuple

from tabulate import tabulate

from .config import REPORT_FILE
from .engine import EngineSnapshot
from .grammar import PRODUCTIONS, prediction_table
from .history import HistoryEntry
from .lexer import DFA_EDGES, NFA_EDGES
from .tokens import Token, TokenType

TABLE_FMT = "github"

TRACE_HEADERS = ["#", "input", "action", "stack"]


def print_table(title: str, headers: List[str], rows: Sequence[Sequence[object]]):
    print(f"\n{title}")
    print(tabulate(rows or [["—"] * len(headers)], headers=headers, tablefmt=TABLE_FMT))


# =========================================
# строки таблиц
# =========================================

def token_rows(tokens: Sequence[Token], cursor: int = -1) -> List[List[str]]:
    rows = []
    for i, t in enumerate(tokens):
        mark = "→" if i == cursor else ""
        value = f"NUM:{t.value}" if t.type is TokenType.NUMBER else t.label
        rows.append([f"{mark}{i}", t.type.name, value])
    return rows


def stack_rows(snap: EngineSnapshot) -> List[List[str]]:
    """стек от вершины ко дну; только что положенные символы помечены '+'"""
    pushed = set(snap.just_pushed)
    rows = []
    for depth, sym in enumerate(snap.stack):
        kind = "$" if sym.value == "$" else ("T" if sym.is_terminal else "N")
        rows.append([depth, sym.value, kind, "+" if sym in pushed else ""])
    return rows


def trace_rows(history: Sequence[HistoryEntry]) -> List[List[object]]:
    return [[i, e.input_label, e.action_label, e.stack_text] for i, e in enumerate(history)]


def shape_rows(snap: EngineSnapshot) -> List[Tuple[str, object]]:
    return [
        ("expectedRowLength", snap.expected_row_length),
        ("currentRowLength", snap.current_row_length),
        ("matrix1Cols", snap.matrix1_cols),
        ("inRow", snap.in_row),
    ]


def automaton_rows() -> List[List[str]]:
    rows = [["nfa", a.value, b.value, lab] for a, b, lab in NFA_EDGES]
    rows += [["dfa", a.value, b.value, lab] for a, b, lab in DFA_EDGES]
    return rows


# =========================================
# печать
# =========================================

def print_status(snap: EngineSnapshot):
    lx = snap.lexer
    if not snap.lexing:
        lex = "done"
    elif lx.partial:
        lex = f"{lx.mode.value} {lx.microstate} '{lx.partial}'"
    else:
        lex = lx.mode.value
    look = snap.lookahead
    la = look.label if look is not None else "-"
    print(f"[{snap.status}] {snap.last_action} | lexer: {lex} | lookahead: {la} | stack: "
          + " ".join(s.value for s in snap.stack))


def print_tokens(snap: EngineSnapshot):
    print_table("токены:", ["#", "type", "value"], token_rows(snap.tokens, snap.token_cursor))


def print_stack(snap: EngineSnapshot):
    title = f"стек pda ({snap.last_operation}):" if snap.last_operation else "стек pda:"
    print_table(title, ["depth", "symbol", "kind", "pushed"], stack_rows(snap))


def print_trace(snap: EngineSnapshot):
    print_table("трассировка:", TRACE_HEADERS, trace_rows(snap.history))


def print_grammar():
    print("\nграмматика:")
    for p in PRODUCTIONS:
        print(f"  {p}")
    headers, rows = prediction_table()
    print_table("таблица предсказаний LL(1):", headers, rows)


def print_result(snap: EngineSnapshot):
    if snap.accepted:
        print(f"\nрезультат: принято — {snap.status}")
    elif snap.locked:
        print(f"\nрезультат: отклонено — {snap.error.kind}: {snap.error.message}")
    else:
        print(f"\nрезультат: не завершено — {snap.status}")


def verdict(snap: EngineSnapshot) -> str:
    if snap.accepted:
        return "ACCEPTED"
    if snap.locked:
        return snap.error.kind
    return "RUNNING"


def print_summary(results: Sequence[Tuple[EngineSnapshot, int]]):
    rows = []
    for snap, steps in results:
        msg = snap.error.message if snap.error else ""
        rows.append([snap.text, verdict(snap), steps, len(snap.history), msg])
    print_table("сводка:", ["expression", "verdict", "steps", "trace", "message"], rows)


# =========================================
# отчёт в markdown
# =========================================

def save_report(snap: EngineSnapshot, filename: str = REPORT_FILE) -> str:
    with open(filename, "w", encoding="utf-8") as f:
        def w(s=""): f.write(s + "\n")

        w(f"# Разбор `{snap.text}`\n")
        w(f"**Результат:** {verdict(snap)} — {snap.status}\n")

        w("## Автоматы распознавания чисел\n")
        w(tabulate(automaton_rows(), headers=["automaton", "from", "to", "label"], tablefmt=TABLE_FMT))

        w("\n## Грамматика\n")
        w("```")
        for p in PRODUCTIONS:
            w(str(p))
        w("```")
        headers, rows = prediction_table()
        w()
        w(tabulate(rows, headers=headers, tablefmt=TABLE_FMT))

        w("\n## Токены\n")
        w(tabulate(token_rows(snap.tokens) or [["—", "—", "—"]],
                   headers=["#", "type", "value"], tablefmt=TABLE_FMT))

        w("\n## Форма операндов\n")
        w(tabulate(shape_rows(snap), headers=["counter", "value"], tablefmt=TABLE_FMT))

        w("\n## Трассировка PDA\n")
        w(tabulate(trace_rows(snap.history), headers=TRACE_HEADERS, tablefmt=TABLE_FMT))

    print(f"[ok] отчет сохранен в {filename}")
    return filename
