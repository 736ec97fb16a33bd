"""
визуализация автоматов чисел (nfa построения и dfa проверки) через graphviz.
активное состояние и ребро из снимка движка подсвечиваются.
"""

from typing import Optional

import graphviz

from .config import DIAGRAM_FILE
from .engine import EngineSnapshot, LexerView
from .lexer import DFA_EDGES, NFA_EDGES, DfaState, Mode, NfaState

ACTIVE = "darkorange"
NORMAL = "gray40"


def build_digraph(view: Optional[LexerView] = None) -> graphviz.Digraph:
    """граф обоих автоматов; view — состояние лексера из снимка (None — ничего не подсвечено)"""
    nfa_node = nfa_edge = dfa_node = None
    if view is not None and view.mode is Mode.BUILDING:
        nfa_node = view.nfa_state
        nfa_edge = (view.nfa_state, view.nfa_target)
    elif view is not None and view.mode is Mode.VERIFYING:
        dfa_node = view.dfa_state

    g = graphviz.Digraph(comment="number recognizers", format="png")
    g.attr(rankdir="LR")

    with g.subgraph(name="cluster_nfa") as c:
        c.attr(label="1. Thompson NFA (построение)")
        for q in NfaState:
            shape = "doublecircle" if q is NfaState.FINAL else "circle"
            color = ACTIVE if q is nfa_node else NORMAL
            c.node(f"n{q.value}", label=q.value, shape=shape, color=color)
        c.node("n_start", label="", shape="point")
        c.edge("n_start", f"n{NfaState.S0.value}")
        for a, b, lab in NFA_EDGES:
            color = ACTIVE if (a, b) == nfa_edge else NORMAL
            c.edge(f"n{a.value}", f"n{b.value}", label=lab, color=color)

    with g.subgraph(name="cluster_dfa") as c:
        c.attr(label="2. DFA (проверка)")
        for q in DfaState:
            shape = "doublecircle" if q is DfaState.ACCEPT else "circle"
            color = ACTIVE if q is dfa_node else NORMAL
            c.node(f"d{q.value}", label=q.value, shape=shape, color=color)
        c.node("d_start", label="", shape="point")
        c.edge("d_start", f"d{DfaState.START.value}")
        for a, b, lab in DFA_EDGES:
            # ребро, по которому только что пришли в текущее состояние
            active = dfa_node is DfaState.ACCEPT and b is DfaState.ACCEPT and \
                (a is DfaState.START) == (view.dfa_cursor == 1)
            c.edge(f"d{a.value}", f"d{b.value}", label=lab, color=ACTIVE if active else NORMAL)

    if view is not None and view.partial:
        g.attr(label=f"{view.mode.value}: {view.partial}")
    return g


def draw_automata(snap: Optional[EngineSnapshot] = None, filename: str = DIAGRAM_FILE) -> str:
    """
    сохраняет .dot всегда; пытается построить .png, если установлен system graphviz.
    возвращает путь к .dot.
    """
    view = snap.lexer if snap is not None else None
    g = build_digraph(view)
    dot_path = g.save(filename=f"{filename}.dot")
    print(f"[ok] dot-файл сохранён: {dot_path}")
    try:
        outpath = g.render(filename=filename, cleanup=True)
        print(f"[ok] png с графом автоматов: {outpath}")
    except graphviz.ExecutableNotFound as e:
        print(f"[i] не удалось сгенерировать png через graphviz: {e}")
        print(f"    вы можете сгенерировать вручную: dot -Tpng {dot_path} -o {filename}.png")
    return dot_path
