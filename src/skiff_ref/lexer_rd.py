"""
Lexer for Skiff - Recursive Descent Parser

Tokenizes Skiff source code into a stream of tokens.

Features:
- Single-pass tokenization
- Position tracking (line, column)
- `//` line comments
- Signed 32-bit range check on number literals
"""

from typing import List

from .token_types import TT, Tok

INT32_MAX = 2**31 - 1

_DIGITS = frozenset("0123456789")

_ESCAPES = {
    'n': '\n',
    't': '\t',
    '"': '"',
    '\\': '\\',
}

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """Skiff lexer. Whitespace and newlines are insignificant."""

    # Keyword mapping
    KEYWORDS = {
        'var': TT.VAR,
        'fun': TT.FUN,
        'return': TT.RETURN,
        'print': TT.PRINT,
        'while': TT.WHILE,
        'for': TT.FOR,
        'if': TT.IF,
        'else': TT.ELSE,
        'true': TT.TRUE,
        'false': TT.FALSE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('<', TT.LT),
        ('>', TT.GT),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('.', TT.DOT),
        (',', TT.COMMA),
        (':', TT.COLON),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.emit(TT.EOF, None, self.line, self.column)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        if ch in (' ', '\t', '\r'):
            self.advance()
            return

        if ch == '\n':
            self.advance()
            self.line += 1
            self.column = 1
            return

        # Comments
        if ch == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        if ch == '"':
            self.scan_string()
            return

        if ch in _DIGITS:
            self.scan_number()
            return

        if ch.isalpha() or ch == '_':
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal "..." and resolve escapes."""
        line, column = self.line, self.column
        self.advance()  # Opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            ch = self.advance()

            if ch == '\\':
                esc = self.advance()
                if esc not in _ESCAPES:
                    raise LexError(f"Unknown escape '\\{esc}' at line {self.line}, col {self.column - 2}")
                value += _ESCAPES[esc]
                continue

            if ch == '\n':
                self.line += 1
                self.column = 1

            value += ch

        if self.pos >= len(self.source):
            raise LexError(f"Unterminated string at line {line}")

        self.advance()  # Closing quote
        self.emit(TT.STRING, value, line, column)

    def scan_number(self):
        """Scan integer literal"""
        line, column = self.line, self.column
        value = ''

        while self.peek() in _DIGITS:
            value += self.advance()

        if int(value) > INT32_MAX:
            raise LexError(f"Number literal {value} out of range at line {line}, col {column}")

        # Keep as string to match Lark
        self.emit(TT.NUMBER, value, line, column)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value, line, column)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                line, column = self.line, self.column
                self.advance(len(op_str))
                self.emit(op_type, op_str, line, column)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}' at line {self.line}, col {self.column}")

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            self.column += 1
        return result

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

    def emit(self, token_type: TT, value, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(type=token_type, value=value, line=line, column=column))

class LexError(Exception):
    """Lexical analysis error"""
    pass


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
