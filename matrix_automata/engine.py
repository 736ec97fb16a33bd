"""
движок пошагового разбора: лексер -> поток токенов -> pda со стеком грамматики.

один вызов step() (он же advance()) делает ровно одно из:
  a) забирает готовый токен у лексера в поток токенов,
  b) продвигает лексер на один микрошаг,
  c) выполняет одно действие pda: совпадение терминала или раскрытие нетерминала.
после ошибки (locked) или принятия (finished) step() ничего не меняет до следующего submit().
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import step_budget
from .errors import LexicalUnknownCharacter, MatrixParseError, MatrixSyntaxError
from .grammar import EXPAND_ERRORS, START, Production, Symbol, describe_expected, matches, predict
from .history import HistoryEntry, HistoryLog
from .lexer import BuildingNumber, DfaState, Lexer, Mode, NfaState, VerifyingNumber
from .semantics import SemanticValidator
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


# =========================================
# снимки состояния для внешнего слоя отображения
# =========================================

@dataclass(frozen=True)
class LexerView:
    mode: Mode
    partial: str = ""
    nfa_state: Optional[NfaState] = None
    nfa_target: Optional[NfaState] = None
    dfa_state: Optional[DfaState] = None
    dfa_cursor: int = 0

    @property
    def microstate(self) -> str:
        if self.mode is Mode.BUILDING:
            if self.nfa_target is None:
                return self.nfa_state.value
            return f"{self.nfa_state.value}->{self.nfa_target.value}"
        if self.mode is Mode.VERIFYING:
            return self.dfa_state.value
        return ""


IDLE_VIEW = LexerView(Mode.IDLE)


@dataclass(frozen=True)
class EngineSnapshot:
    text: str
    lexing: bool
    lexer: LexerView
    stack: Tuple[Symbol, ...]           # от вершины ко дну
    tokens: Tuple[Token, ...]
    token_cursor: int
    status: str
    last_action: str
    last_operation: str
    just_pushed: Tuple[Symbol, ...]
    locked: bool
    finished: bool
    error: Optional[MatrixParseError]
    expected_row_length: int
    current_row_length: int
    matrix1_cols: int
    in_row: bool
    history: Tuple[HistoryEntry, ...]

    @property
    def accepted(self) -> bool:
        return self.finished and not self.locked

    @property
    def done(self) -> bool:
        return self.locked or self.finished

    @property
    def lookahead(self) -> Optional[Token]:
        if self.lexing or self.token_cursor >= len(self.tokens):
            return None
        return self.tokens[self.token_cursor]


# =========================================
# движок
# =========================================

class ParserEngine:

    def __init__(self, text: str = ""):
        self.reset(text)

    def reset(self, text: str) -> None:
        self.text = text
        self.stack: List[Symbol] = [Symbol.END, START]
        self.lexer: Optional[Lexer] = Lexer(text)
        self.tokens: List[Token] = []
        self.token_cursor = 0
        self.lexing_phase = True
        self.locked = False
        self.finished = False
        self.semantics = SemanticValidator()
        self.status = "Phase 1: Lexing"
        self.last_action = "Init"
        self.last_operation = ""
        self.just_pushed: List[Symbol] = []
        self.error: Optional[MatrixParseError] = None
        self.history = HistoryLog()
        self._log("Init")
        logger.debug("engine reset: %r", text)

    def submit(self, text: str) -> None:
        self.reset(text)

    @property
    def done(self) -> bool:
        return self.locked or self.finished

    # ---------- один шаг ----------
    def step(self) -> None:
        if self.done:
            return
        self.just_pushed = []
        self.last_operation = ""
        if self.lexing_phase:
            self._step_lexing()
            return
        try:
            self._step_parsing()
        except MatrixParseError as e:
            self._fail(e)

    advance = step

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        шагает до принятия или ошибки; возвращает число сделанных шагов.
        без max_steps предел берётся из длины входа (config.step_budget).
        """
        if max_steps is None:
            max_steps = step_budget(self.text)
        n = 0
        while not self.done and n < max_steps:
            self.step()
            n += 1
        if not self.done:
            logger.warning("run stopped after %d steps without finishing", n)
        return n

    # ---------- фаза 1: лексика ----------
    def _step_lexing(self) -> None:
        tok = self.lexer.take_ready()
        if tok is not None:
            self.tokens.append(tok)
            self.last_action = f"Lexer: Generated {tok.label}"
            self._log(f"Token: {tok.label}")
            if tok.type is TokenType.END:
                # лексер больше не нужен: всё, что он знал, уже в self.tokens
                self.lexer = None
                self.lexing_phase = False
                self.status = "Phase 2: Parsing (PDA)"
                self.last_action = "Lexing Done. Starting PDA."
            return

        busy = self.lexer.step()
        mode = self.lexer.state.mode
        if busy and mode is Mode.BUILDING:
            self.last_action = "Lexer: 1. NFA Running..."
        elif busy and mode is Mode.VERIFYING:
            self.last_action = "Lexer: 2. DFA Verifying..."
        elif self.lexer.has_ready:
            self.last_action = f"Lexer: Recognized {self.lexer.ready.label}"

    # ---------- фаза 2: pda ----------
    def _step_parsing(self) -> None:
        top = self.stack[-1]
        look = self.tokens[self.token_cursor]

        if top is Symbol.END:
            if look.type is not TokenType.END:
                raise MatrixSyntaxError(TokenType.END.value, look, "Trailing characters found")
            self.stack.pop()
            self.finished = True
            self.status = "ACCEPTED"
            self.last_action = "Done"
            self._log("ACCEPTED")
            logger.info("accepted: %r", self.text)
            return

        if top.is_terminal:
            self._match(top, look)
        else:
            self._expand(top, look)

    def _match(self, top: Symbol, look: Token) -> None:
        if not matches(top, look.type):
            if look.type is TokenType.UNKNOWN:
                raise LexicalUnknownCharacter(top.value, look)
            raise MatrixSyntaxError(top.value, look)
        # семантика раньше pop: при ошибке терминал остаётся на стеке
        for note in self.semantics.on_match(top):
            self._log(note)
        self.stack.pop()
        self.token_cursor += 1
        self.last_action = f"PDA: Matched {top.value}"
        self.last_operation = "POP & MATCH"
        self._log(f"Match {top.value}")
        logger.debug("match %s (%r)", top.value, look.value)

    def _expand(self, top: Symbol, look: Token) -> None:
        self.stack.pop()
        prod = predict(top, look.type)
        if prod is None:
            expected = describe_expected(top)
            message = EXPAND_ERRORS.get(top)
            if look.type is TokenType.UNKNOWN:
                raise LexicalUnknownCharacter(expected, look, message)
            raise MatrixSyntaxError(expected, look, message)
        if prod.is_epsilon:
            self.last_action = f"PDA: {prod}"
            self.last_operation = "POP ε"
            self._log("Epsilon")
            logger.debug("epsilon %s on %s", top.value, look.label)
            return
        self._push(prod)

    def _push(self, prod: Production) -> None:
        # самый левый символ правой части оказывается на вершине
        pushed = list(reversed(prod.rhs))
        self.stack.extend(pushed)
        self.just_pushed = pushed
        self.last_operation = f"PUSH {len(pushed)}"
        self.last_action = f"PDA: {prod}"
        self._log(f"PUSH {len(pushed)}: {prod}")
        logger.debug("expand %s", prod)

    def _fail(self, err: MatrixParseError) -> None:
        self.error = err
        self.locked = True
        self.status = f"ERROR: {err.message}"
        self.last_action = "STOPPED"
        self._log(f"ERROR: {err.message}")
        logger.info("locked on %s: %s", err.kind, err.message)

    # ---------- журнал и снимки ----------
    def _input_label(self) -> str:
        if self.lexing_phase:
            return "LEX"
        if self.token_cursor < len(self.tokens):
            return self.tokens[self.token_cursor].label
        return TokenType.END.value

    def _log(self, action: str) -> None:
        self.history.append(self._input_label(), action, self.stack)

    def _lexer_view(self) -> LexerView:
        if self.lexer is None:
            return IDLE_VIEW
        st = self.lexer.state
        if isinstance(st, BuildingNumber):
            return LexerView(Mode.BUILDING, st.partial, nfa_state=st.node, nfa_target=st.target)
        if isinstance(st, VerifyingNumber):
            return LexerView(Mode.VERIFYING, st.partial, dfa_state=st.state, dfa_cursor=st.cursor)
        return IDLE_VIEW

    def inspect(self) -> EngineSnapshot:
        sem = self.semantics
        return EngineSnapshot(
            text=self.text,
            lexing=self.lexing_phase,
            lexer=self._lexer_view(),
            stack=tuple(reversed(self.stack)),
            tokens=tuple(self.tokens),
            token_cursor=self.token_cursor,
            status=self.status,
            last_action=self.last_action,
            last_operation=self.last_operation,
            just_pushed=tuple(self.just_pushed),
            locked=self.locked,
            finished=self.finished,
            error=self.error,
            expected_row_length=sem.expected_row_length,
            current_row_length=sem.current_row_length,
            matrix1_cols=sem.matrix1_cols,
            in_row=sem.in_row,
            history=self.history.entries,
        )
