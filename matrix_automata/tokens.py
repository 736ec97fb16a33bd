"""
базовые типы лексики: вид токена, сам токен и классификатор символов.

язык выражений над матрицами:
  - числа:       digit+
  - скобки:      [ ]
  - разделитель: ,
  - операторы:   + - *
  - пробелы:     разделяют токены, сами токен не образуют
"""

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    LBRACKET = "["
    RBRACKET = "]"
    COMMA    = ","
    PLUS     = "+"
    MINUS    = "-"
    MULTIPLY = "*"
    NUMBER   = "NUMBER"
    UNKNOWN  = "UNKNOWN"
    END      = "EOF"
    NONE     = "NONE"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str

    @property
    def label(self) -> str:
        """печатное имя для таблиц: у конца ввода значения нет, показываем EOF"""
        if self.type is TokenType.END:
            return TokenType.END.value
        return self.value


# пустой слот «готового» токена у лексера
NO_TOKEN = Token(TokenType.NONE, "")
END_TOKEN = Token(TokenType.END, "")

# односимвольные токены, которые не идут через автомат чисел
SINGLE_CHAR_TOKENS = {
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
}


# =========================================
# предикаты (классы символов)
# =========================================

def is_digit(ch: str) -> bool:
    # только ascii-цифры: '²'.isdigit() тоже True, а такое число нам не нужно
    return len(ch) == 1 and "0" <= ch <= "9"

def is_space(ch: str) -> bool:
    return len(ch) == 1 and ch.isspace()


def classify_char(ch: str) -> TokenType:
    """
    вид токена, который начинается с символа ch.
    пустая строка означает конец ввода; пробелы классифицировать не нужно, лексер их пропускает.
    """
    if ch == "":
        return TokenType.END
    if is_digit(ch):
        return TokenType.NUMBER
    return SINGLE_CHAR_TOKENS.get(ch, TokenType.UNKNOWN)
