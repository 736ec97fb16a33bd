"""
matrix_automata — пошаговый симулятор лексического и синтаксического анализа
выражений над матрицами: nfa/dfa для чисел, pda по фиксированной грамматике,
семантика формы матриц и полный журнал трассировки.
"""

from .engine import EngineSnapshot, LexerView, ParserEngine
from .errors import (
    DimensionMismatch, InvalidMatrixSize, LexicalUnknownCharacter,
    MatrixParseError, MatrixSyntaxError, RowMismatch,
)
from .grammar import Production, Symbol
from .history import HistoryEntry, HistoryLog
from .lexer import Lexer, Mode, tokenize
from .tokens import Token, TokenType, classify_char

__version__ = "0.1.0"
