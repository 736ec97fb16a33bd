"""Tests for the fixed grammar, its prediction table and the shape validator."""

import pytest

from matrix_automata.errors import DimensionMismatch, InvalidMatrixSize, RowMismatch
from matrix_automata.grammar import (
    EXPAND_ERRORS, NONTERMINALS, PRODUCTIONS, RULES, Symbol, describe_expected, matches, predict,
    prediction_table,
)
from matrix_automata.semantics import SemanticValidator
from matrix_automata.tokens import TokenType

S = Symbol

# ###############
# Test Helpers
# ###############


def _rhs(top: Symbol, look: TokenType):
    prod = predict(top, look)
    return None if prod is None else prod.rhs


def _feed(v: SemanticValidator, symbols) -> list:
    notes = []
    for sym in symbols:
        notes.extend(v.on_match(sym))
    return notes


def _row(n: int) -> list:
    syms = [S.LBRACKET]
    for i in range(n):
        if i:
            syms.append(S.COMMA)
        syms.append(S.NUM)
    return syms + [S.RBRACKET]


# ###############
# Symbols
# ###############


class TestSymbols:
    def test_terminals(self) -> None:
        terms = {s for s in Symbol if s.is_terminal}
        assert {s.value for s in terms} == {"[", "]", ",", "+", "-", "*", "num"}

    def test_nonterminals(self) -> None:
        nts = [s for s in Symbol if s.is_nonterminal]
        assert set(nts) == set(NONTERMINALS)
        assert len(nts) == 11

    def test_end_marker_is_neither(self) -> None:
        assert not S.END.is_terminal
        assert not S.END.is_nonterminal

    def test_matches(self) -> None:
        assert matches(S.NUM, TokenType.NUMBER)
        assert matches(S.MULTIPLY, TokenType.MULTIPLY)
        assert not matches(S.PLUS, TokenType.UNKNOWN)
        assert not matches(S.END, TokenType.END)


# ###############
# Prediction
# ###############


class TestPredict:
    @pytest.mark.parametrize(
        ("top", "look", "rhs"),
        [
            (S.S, TokenType.LBRACKET, (S.M, S.OP, S.M)),
            (S.S, TokenType.UNKNOWN, (S.M, S.OP, S.M)),
            (S.OP, TokenType.PLUS, (S.PLUS,)),
            (S.OP, TokenType.MINUS, (S.MINUS,)),
            (S.OP, TokenType.MULTIPLY, (S.MULTIPLY,)),
            (S.M, TokenType.LBRACKET, (S.CORE, S.S_OPT)),
            (S.S_OPT, TokenType.NUMBER, (S.NUM,)),
            (S.S_OPT, TokenType.PLUS, ()),
            (S.S_OPT, TokenType.END, ()),
            (S.CORE, TokenType.LBRACKET, (S.LBRACKET, S.INSIDE, S.RBRACKET)),
            (S.INSIDE, TokenType.LBRACKET, (S.ROW_LIST,)),
            (S.INSIDE, TokenType.NUMBER, (S.NUM_LIST,)),
            (S.ROW_LIST, TokenType.LBRACKET, (S.ROW, S.ROW_TAIL)),
            (S.ROW, TokenType.LBRACKET, (S.LBRACKET, S.NUM_LIST, S.RBRACKET)),
            (S.ROW_TAIL, TokenType.COMMA, (S.COMMA, S.ROW_LIST)),
            (S.ROW_TAIL, TokenType.RBRACKET, ()),
            (S.NUM_LIST, TokenType.NUMBER, (S.NUM, S.NUM_TAIL)),
            (S.NUM_TAIL, TokenType.COMMA, (S.COMMA, S.NUM_LIST)),
            (S.NUM_TAIL, TokenType.RBRACKET, ()),
        ],
    )
    def test_rule_choice(self, top, look, rhs) -> None:
        assert _rhs(top, look) == rhs

    @pytest.mark.parametrize(
        ("top", "look"),
        [
            (S.OP, TokenType.UNKNOWN),
            (S.OP, TokenType.END),
            (S.CORE, TokenType.NUMBER),
            (S.INSIDE, TokenType.RBRACKET),
            (S.ROW, TokenType.NUMBER),
            (S.NUM_LIST, TokenType.RBRACKET),
        ],
    )
    def test_no_rule(self, top, look) -> None:
        assert predict(top, look) is None

    def test_expected_description(self) -> None:
        assert describe_expected(S.OP) == "+ | - | *"
        assert describe_expected(S.INSIDE) == "[ | num"
        assert describe_expected(S.NUM_LIST) == "num"

    def test_every_failing_nonterminal_has_a_message(self) -> None:
        failing = {nt for nt in NONTERMINALS if all(la is not None for la, _p in RULES[nt])}
        assert failing == set(EXPAND_ERRORS)
        assert EXPAND_ERRORS[S.OP] == "Expected OP"

    def test_epsilon_productions_print_as_epsilon(self) -> None:
        eps = [str(p) for p in PRODUCTIONS if p.is_epsilon]
        assert sorted(eps) == ["NumTail -> ε", "RowTail -> ε", "S_OPT -> ε"]

    def test_prediction_table_shape(self) -> None:
        headers, rows = prediction_table()
        assert len(headers) == 9
        assert len(rows) == len(NONTERMINALS)
        op_row = next(r for r in rows if r[0] == "OP")
        assert "OP -> +" in op_row
        assert op_row[-1] == "-"


# ###############
# Shape validator
# ###############


class TestSemanticValidator:
    def test_first_row_sets_width(self) -> None:
        v = SemanticValidator()
        notes = _feed(v, _row(3))
        assert notes == ["Set Dim: 3"]
        assert v.expected_row_length == 3
        assert not v.in_row

    def test_numbers_outside_row_are_not_counted(self) -> None:
        v = SemanticValidator()
        _feed(v, _row(2))
        v.on_match(S.NUM)
        assert v.current_row_length == 0

    def test_single_element_row_is_rejected(self) -> None:
        v = SemanticValidator()
        with pytest.raises(InvalidMatrixSize) as exc:
            _feed(v, _row(1))
        assert exc.value.actual == 1

    def test_row_mismatch_within_operand(self) -> None:
        v = SemanticValidator()
        with pytest.raises(RowMismatch) as exc:
            _feed(v, [S.LBRACKET] + _row(2) + [S.COMMA] + _row(3))
        assert (exc.value.expected, exc.value.actual) == (2, 3)

    def test_operator_locks_left_width_and_resets(self) -> None:
        v = SemanticValidator()
        notes = _feed(v, _row(2) + [S.MINUS])
        assert notes == ["Set Dim: 2", "Locked Matrix 1 Dim: 2"]
        assert v.matrix1_cols == 2
        assert v.expected_row_length == -1
        assert v.current_row_length == 0
        assert not v.in_row

    def test_dimension_mismatch_against_left_operand(self) -> None:
        v = SemanticValidator()
        with pytest.raises(DimensionMismatch) as exc:
            _feed(v, _row(2) + [S.PLUS] + _row(3))
        assert (exc.value.expected, exc.value.actual) == (2, 3)

    def test_minimum_size_is_checked_before_dimension(self) -> None:
        v = SemanticValidator()
        with pytest.raises(InvalidMatrixSize):
            _feed(v, _row(3) + [S.MULTIPLY] + _row(1))

    def test_dimension_is_checked_before_row_consistency(self) -> None:
        v = SemanticValidator()
        with pytest.raises(DimensionMismatch):
            _feed(v, _row(2) + [S.PLUS, S.LBRACKET] + _row(2) + [S.COMMA] + _row(3))

    def test_outer_bracket_close_is_ignored(self) -> None:
        v = SemanticValidator()
        notes = _feed(v, [S.LBRACKET] + _row(2) + [S.COMMA] + _row(2) + [S.RBRACKET])
        assert notes == ["Set Dim: 2"]
        assert v.expected_row_length == 2
