"""
ошибки разбора. любая из них останавливает текущий прогон: движок блокируется до следующего submit().
"""

from typing import Optional

from .tokens import Token


class MatrixParseError(Exception):
    """общий предок всех ошибок разбора; message — строка для статуса и журнала"""

    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MatrixSyntaxError(MatrixParseError):
    """терминал не совпал с lookahead, нет правила для нетерминала или лишний ввод в конце"""

    kind = "SyntaxError"

    def __init__(self, expected: str, found: Optional[Token] = None, message: Optional[str] = None):
        super().__init__(message or f"Expected {expected}")
        self.expected = expected
        self.found = found


class LexicalUnknownCharacter(MatrixSyntaxError):
    """синтаксическая ошибка, когда под lookahead лежит нераспознанный символ (токен UNKNOWN)"""

    kind = "LexicalUnknownCharacter"

    def __init__(self, expected: str, found: Token, message: Optional[str] = None):
        base = message or f"Expected {expected}"
        super().__init__(expected, found, f"{base}, got unknown character {found.value!r}")

    @property
    def char(self) -> str:
        return self.found.value


class InvalidMatrixSize(MatrixParseError):
    kind = "InvalidMatrixSize"

    def __init__(self, actual: int):
        super().__init__("Invalid Matrix: 1x1 not allowed")
        self.actual = actual


class DimensionMismatch(MatrixParseError):
    """строка правого операнда не совпала по длине с зафиксированной шириной левого"""

    kind = "DimensionMismatch"

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Dimension Mismatch! Matrix 1={expected}, Matrix 2={actual}")
        self.expected = expected
        self.actual = actual


class RowMismatch(MatrixParseError):
    """строки одного операнда разной длины"""

    kind = "RowMismatch"

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Row Mismatch! Exp {expected}, Got {actual}")
        self.expected = expected
        self.actual = actual
