"""
пошаговый лексер: каждое число проходит два автомата подряд.

1. построение (nfa в духе Томпсона):
       0 --digit--> 1 --ε--> 2 --ε--> F
                             2 --ε--> 3 --digit--> 4 --ε--> 2
   на каждом микрошаге проходим ровно одно ребро, цифры копятся в partial.
2. проверка (оптимизированный dfa):
       Start --digit--> Acc,  Acc --digit--> Acc
   заново проходит накопленный текст по одному символу за шаг.

односимвольные токены ([ ] , + - *) выдаются сразу, без автоматов.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .tokens import END_TOKEN, NO_TOKEN, Token, TokenType, classify_char, is_digit, is_space

logger = logging.getLogger(__name__)


# =========================================
# состояния автоматов
# =========================================

class Mode(enum.Enum):
    IDLE      = "Idle"
    BUILDING  = "BuildingNumber"
    VERIFYING = "VerifyingNumber"


class NfaState(enum.Enum):
    S0    = "0"
    S1    = "1"
    S2    = "2"
    S3    = "3"
    S4    = "4"
    FINAL = "F"


class DfaState(enum.Enum):
    START  = "Start"
    ACCEPT = "Acc"


# рёбра автоматов (откуда, куда, метка); нужны для печати и рисования
NFA_EDGES: List[Tuple[NfaState, NfaState, str]] = [
    (NfaState.S0, NfaState.S1,    "digit"),
    (NfaState.S1, NfaState.S2,    "ε"),
    (NfaState.S2, NfaState.S3,    "ε"),
    (NfaState.S3, NfaState.S4,    "digit"),
    (NfaState.S4, NfaState.S2,    "ε"),
    (NfaState.S2, NfaState.FINAL, "ε"),
]

DFA_EDGES: List[Tuple[DfaState, DfaState, str]] = [
    (DfaState.START,  DfaState.ACCEPT, "digit"),
    (DfaState.ACCEPT, DfaState.ACCEPT, "digit"),
]


@dataclass(frozen=True)
class Idle:
    mode = Mode.IDLE


@dataclass(frozen=True)
class BuildingNumber:
    microstep: int                  # номер следующего действия цикла (0..5)
    partial: str                    # цифры, собранные к этому моменту
    node: NfaState                  # текущее состояние nfa
    target: Optional[NfaState]      # ребро, по которому только что прошли (None на входе)
    mode = Mode.BUILDING


@dataclass(frozen=True)
class VerifyingNumber:
    cursor: int
    partial: str
    state: DfaState
    mode = Mode.VERIFYING


LexerState = Union[Idle, BuildingNumber, VerifyingNumber]

IDLE = Idle()


# =========================================
# сам лексер
# =========================================

class Lexer:
    """
    step() делает ровно один микропереход и возвращает True, пока до готового токена нужны ещё шаги.
    готовый токен лежит в однослотовом канале ready; пока его не забрали через take_ready(),
    step() ничего не делает.
    """

    def __init__(self, text: str = ""):
        self.reset(text)

    def reset(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.state: LexerState = IDLE
        self.ready: Token = NO_TOKEN
        self.finished = False

    # ---------- канал готового токена ----------
    @property
    def has_ready(self) -> bool:
        return self.ready.type is not TokenType.NONE

    def take_ready(self) -> Optional[Token]:
        if not self.has_ready:
            return None
        tok = self.ready
        self.ready = NO_TOKEN
        return tok

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    # ---------- один микрошаг ----------
    def step(self) -> bool:
        if self.has_ready or self.finished:
            return False
        st = self.state
        if isinstance(st, BuildingNumber):
            return self._step_build(st)
        if isinstance(st, VerifyingNumber):
            return self._step_verify(st)
        return self._step_idle()

    def _emit(self, tok: Token) -> bool:
        self.ready = tok
        logger.debug("lexer: token %s %r", tok.type.name, tok.value)
        return False

    def _step_idle(self) -> bool:
        while self.pos < len(self.text) and is_space(self.text[self.pos]):
            self.pos += 1
        if self.pos >= len(self.text):
            self.finished = True
            return self._emit(END_TOKEN)

        ch = self.peek()
        kind = classify_char(ch)
        if kind is TokenType.NUMBER:
            # позицию не сдвигаем: первую цифру съест микрошаг 0
            self.state = BuildingNumber(0, "", NfaState.S0, None)
            return True

        self.pos += 1
        return self._emit(Token(kind, ch))

    def _step_build(self, st: BuildingNumber) -> bool:
        k = st.microstep
        if k == 0:
            # 0 --digit--> 1: первая цифра
            self.pos += 1
            self.state = BuildingNumber(1, st.partial + self.text[self.pos - 1], NfaState.S0, NfaState.S1)
        elif k == 1:
            self.state = BuildingNumber(2, st.partial, NfaState.S1, NfaState.S2)
        elif k == 2:
            # развилка: ещё цифра -> цикл через 3 и 4, иначе в F
            if is_digit(self.peek()):
                self.state = BuildingNumber(3, st.partial, NfaState.S2, NfaState.S3)
            else:
                self.state = BuildingNumber(5, st.partial, NfaState.S2, NfaState.FINAL)
        elif k == 3:
            self.pos += 1
            self.state = BuildingNumber(4, st.partial + self.text[self.pos - 1], NfaState.S3, NfaState.S4)
        elif k == 4:
            self.state = BuildingNumber(2, st.partial, NfaState.S4, NfaState.S2)
        elif k == 5:
            self.state = VerifyingNumber(0, st.partial, DfaState.START)
        else:
            raise RuntimeError(f"unknown nfa microstep: {k}")
        return True

    def _step_verify(self, st: VerifyingNumber) -> bool:
        n = len(st.partial)
        if st.cursor < n:
            # Start --digit--> Acc, потом петля Acc --digit--> Acc
            self.state = VerifyingNumber(st.cursor + 1, st.partial, DfaState.ACCEPT)
            return True
        if st.state is not DfaState.ACCEPT:
            raise RuntimeError("dfa reached end of input in non-accepting state")
        self.state = IDLE
        return self._emit(Token(TokenType.NUMBER, st.partial))


def tokenize(text: str) -> List[Token]:
    """весь поток токенов сразу (включая EOF); удобно для проверок и отчётов"""
    lx = Lexer(text)
    out: List[Token] = []
    while True:
        lx.step()
        tok = lx.take_ready()
        if tok is None:
            continue
        out.append(tok)
        if tok.type is TokenType.END:
            return out
