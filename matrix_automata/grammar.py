"""
фиксированная грамматика выражений над матрицами и таблица предсказаний для pda.

    S       -> M OP M
    OP      -> '+' | '-' | '*'
    M       -> Core S_OPT
    S_OPT   -> 'num' | ε
    Core    -> '[' Inside ']'
    Inside  -> RowList | NumList
    RowList -> Row RowTail
    Row     -> '[' NumList ']'
    RowTail -> ',' RowList | ε
    NumList -> 'num' NumTail
    NumTail -> ',' NumList | ε

на каждую пару (верх стека, lookahead) подходит не больше одного правила, откатов нет.
"""

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .tokens import TokenType


class Symbol(enum.Enum):
    # терминалы
    LBRACKET = "["
    RBRACKET = "]"
    COMMA    = ","
    PLUS     = "+"
    MINUS    = "-"
    MULTIPLY = "*"
    NUM      = "num"
    # нетерминалы
    S        = "S"
    OP       = "OP"
    M        = "M"
    S_OPT    = "S_OPT"
    CORE     = "Core"
    INSIDE   = "Inside"
    ROW_LIST = "RowList"
    ROW      = "Row"
    ROW_TAIL = "RowTail"
    NUM_LIST = "NumList"
    NUM_TAIL = "NumTail"
    # дно стека
    END      = "$"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_TOKENS

    @property
    def is_nonterminal(self) -> bool:
        return self is not Symbol.END and not self.is_terminal


# терминал грамматики -> вид токена, с которым он сравнивается
TERMINAL_TOKENS: Dict[Symbol, TokenType] = {
    Symbol.LBRACKET: TokenType.LBRACKET,
    Symbol.RBRACKET: TokenType.RBRACKET,
    Symbol.COMMA:    TokenType.COMMA,
    Symbol.PLUS:     TokenType.PLUS,
    Symbol.MINUS:    TokenType.MINUS,
    Symbol.MULTIPLY: TokenType.MULTIPLY,
    Symbol.NUM:      TokenType.NUMBER,
}

# вид токена -> имя терминала в грамматике
TERMINAL_NAMES: Dict[TokenType, str] = {tt: sym.value for sym, tt in TERMINAL_TOKENS.items()}

OPERATORS = frozenset({Symbol.PLUS, Symbol.MINUS, Symbol.MULTIPLY})

START = Symbol.S


def matches(sym: Symbol, tok_type: TokenType) -> bool:
    return TERMINAL_TOKENS.get(sym) is tok_type


@dataclass(frozen=True)
class Production:
    lhs: Symbol
    rhs: Tuple[Symbol, ...]

    @property
    def is_epsilon(self) -> bool:
        return not self.rhs

    def __str__(self) -> str:
        rhs = " ".join(s.value for s in self.rhs) if self.rhs else "ε"
        return f"{self.lhs.value} -> {rhs}"


def _p(lhs: Symbol, *rhs: Symbol) -> Production:
    return Production(lhs, tuple(rhs))


def _on(*types: TokenType) -> FrozenSet[TokenType]:
    return frozenset(types)


# для каждого нетерминала: список (множество lookahead, правило).
# lookahead None — правило «иначе», берётся, если ничего другого не подошло.
Rule = Tuple[Optional[FrozenSet[TokenType]], Production]

RULES: Dict[Symbol, List[Rule]] = {
    Symbol.S: [
        (None, _p(Symbol.S, Symbol.M, Symbol.OP, Symbol.M)),
    ],
    Symbol.OP: [
        (_on(TokenType.PLUS),     _p(Symbol.OP, Symbol.PLUS)),
        (_on(TokenType.MINUS),    _p(Symbol.OP, Symbol.MINUS)),
        (_on(TokenType.MULTIPLY), _p(Symbol.OP, Symbol.MULTIPLY)),
    ],
    Symbol.M: [
        (None, _p(Symbol.M, Symbol.CORE, Symbol.S_OPT)),
    ],
    Symbol.S_OPT: [
        (_on(TokenType.NUMBER), _p(Symbol.S_OPT, Symbol.NUM)),
        (None,                  _p(Symbol.S_OPT)),
    ],
    Symbol.CORE: [
        (_on(TokenType.LBRACKET), _p(Symbol.CORE, Symbol.LBRACKET, Symbol.INSIDE, Symbol.RBRACKET)),
    ],
    Symbol.INSIDE: [
        (_on(TokenType.LBRACKET), _p(Symbol.INSIDE, Symbol.ROW_LIST)),
        (_on(TokenType.NUMBER),   _p(Symbol.INSIDE, Symbol.NUM_LIST)),
    ],
    Symbol.ROW_LIST: [
        (None, _p(Symbol.ROW_LIST, Symbol.ROW, Symbol.ROW_TAIL)),
    ],
    Symbol.ROW: [
        (_on(TokenType.LBRACKET), _p(Symbol.ROW, Symbol.LBRACKET, Symbol.NUM_LIST, Symbol.RBRACKET)),
    ],
    Symbol.ROW_TAIL: [
        (_on(TokenType.COMMA), _p(Symbol.ROW_TAIL, Symbol.COMMA, Symbol.ROW_LIST)),
        (None,                 _p(Symbol.ROW_TAIL)),
    ],
    Symbol.NUM_LIST: [
        (_on(TokenType.NUMBER), _p(Symbol.NUM_LIST, Symbol.NUM, Symbol.NUM_TAIL)),
    ],
    Symbol.NUM_TAIL: [
        (_on(TokenType.COMMA), _p(Symbol.NUM_TAIL, Symbol.COMMA, Symbol.NUM_LIST)),
        (None,                 _p(Symbol.NUM_TAIL)),
    ],
}

# сообщения, когда у нетерминала нет правила под lookahead
EXPAND_ERRORS: Dict[Symbol, str] = {
    Symbol.OP:       "Expected OP",
    Symbol.CORE:     "Exp [",
    Symbol.INSIDE:   "Invalid",
    Symbol.ROW:      "Row needs [",
    Symbol.NUM_LIST: "Exp Num",
}

PRODUCTIONS: List[Production] = [prod for rules in RULES.values() for _la, prod in rules]

NONTERMINALS: List[Symbol] = list(RULES)


def predict(top: Symbol, lookahead: TokenType) -> Optional[Production]:
    """правило для нетерминала top при данном lookahead; None, если ни одно не подходит"""
    fallback: Optional[Production] = None
    for la, prod in RULES[top]:
        if la is None:
            fallback = prod
        elif lookahead in la:
            return prod
    return fallback


def expected_tokens(top: Symbol) -> List[TokenType]:
    """виды токенов, с которых может начинаться top (для сообщения об ошибке)"""
    out: List[TokenType] = []
    for la, _prod in RULES[top]:
        for t in sorted(la or (), key=lambda x: x.value):
            if t not in out:
                out.append(t)
    return out


def describe_expected(top: Symbol) -> str:
    names = [TERMINAL_NAMES[t] for t in expected_tokens(top)]
    return " | ".join(names) if names else top.value


def prediction_table() -> Tuple[List[str], List[List[str]]]:
    """
    таблица предсказаний LL(1): строки — нетерминалы, столбцы — терминалы и «иначе».
    возвращает (headers, rows) для tabulate.
    """
    cols = list(TERMINAL_TOKENS.values())
    headers = ["нетерминал"] + [TERMINAL_NAMES[t] for t in cols] + ["иначе"]
    rows: List[List[str]] = []
    for nt in NONTERMINALS:
        row = [nt.value]
        for t in cols:
            prod = None
            for la, p in RULES[nt]:
                if la is not None and t in la:
                    prod = p
            row.append(str(prod) if prod else "-")
        other = [p for la, p in RULES[nt] if la is None]
        row.append(str(other[0]) if other else "-")
        rows.append(row)
    return headers, rows
