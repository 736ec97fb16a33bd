"""
семантика формы матриц. вызывается только при совпадении терминала, раскрытия правил её не трогают.

при закрытии строки (']' при открытой строке) проверки идут строго в таком порядке:
  1. в строке минимум MIN_ROW_LENGTH чисел              -> InvalidMatrixSize
  2. длина равна зафиксированной ширине левого операнда -> DimensionMismatch
  3. длина равна ширине первой строки этого операнда    -> RowMismatch
оператор (+ - *) фиксирует ширину левого операнда и сбрасывает счётчики строк.
"""

from typing import List

from .errors import DimensionMismatch, InvalidMatrixSize, RowMismatch
from .grammar import OPERATORS, Symbol

MIN_ROW_LENGTH = 2

UNSET = -1


class SemanticValidator:

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.expected_row_length = UNSET   # ширина строк текущего операнда
        self.current_row_length = 0        # чисел в открытой строке
        self.matrix1_cols = UNSET          # ширина левого операнда после оператора
        self.in_row = False

    def on_match(self, sym: Symbol) -> List[str]:
        """
        обновляет счётчики после совпадения терминала sym.
        возвращает заметки для журнала (может быть пусто); при нарушении формы бросает ошибку.
        """
        if sym is Symbol.NUM:
            if self.in_row:
                self.current_row_length += 1
            return []
        if sym is Symbol.LBRACKET:
            self.in_row = True
            self.current_row_length = 0
            return []
        if sym is Symbol.RBRACKET:
            return self._close_row() if self.in_row else []
        if sym in OPERATORS:
            return self._lock_left_operand()
        return []

    def _close_row(self) -> List[str]:
        n = self.current_row_length
        notes: List[str] = []
        if n < MIN_ROW_LENGTH:
            raise InvalidMatrixSize(n)
        if self.matrix1_cols != UNSET and n != self.matrix1_cols:
            raise DimensionMismatch(self.matrix1_cols, n)
        if self.expected_row_length == UNSET:
            self.expected_row_length = n
            notes.append(f"Set Dim: {n}")
        elif n != self.expected_row_length:
            raise RowMismatch(self.expected_row_length, n)
        self.current_row_length = 0
        self.in_row = False
        return notes

    def _lock_left_operand(self) -> List[str]:
        notes: List[str] = []
        if self.expected_row_length != UNSET:
            self.matrix1_cols = self.expected_row_length
            notes.append(f"Locked Matrix 1 Dim: {self.matrix1_cols}")
        self.expected_row_length = UNSET
        self.current_row_length = 0
        self.in_row = False
        return notes
