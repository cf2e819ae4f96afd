"""
SDC Lexer
=========
Tokenizes SDC (TCL-dialect) constraint text into a stream of typed tokens.

Handles TCL quoting: double-quoted strings with escapes, verbatim braced
words with nesting, and bracketed sub-commands kept as opaque text.
Tokenization never fails: unmatched delimiters are reported as ERROR
tokens plus a LexDiagnostic, and the stream always ends with EOF.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """All token types produced by the SDC lexer."""
    COMMAND       = auto()   # first word of a command
    FLAG          = auto()   # -period
    STRING        = auto()   # words, "quoted", {braced}, [bracketed]
    NUMBER        = auto()   # 10, -0.5, 1e-3, 10.5ns
    VARIABLE      = auto()   # $name / ${name}  (value holds the name only)

    # Emitted only for unterminated or stray delimiters
    LIST_START    = auto()   # {
    LIST_END      = auto()   # }
    BRACKET_START = auto()   # [
    BRACKET_END   = auto()   # ]

    # Separators
    SEMICOLON     = auto()
    NEWLINE       = auto()

    # Special
    EOF           = auto()
    ERROR         = auto()


SEPARATORS = (TokenType.NEWLINE, TokenType.SEMICOLON)


@dataclass
class Token:
    """A single token from the SDC source."""
    type: TokenType
    value: str
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


@dataclass
class LexDiagnostic:
    """An unmatched-delimiter finding, reported at end-of-file position."""
    kind: str          # "unmatched_brace" | "unmatched_bracket" | "unmatched_quote"
    message: str
    line: int
    col: int
    stray: bool = False   # a closer with no opener, rather than a missing closer


ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r",
    "\\": "\\", '"': '"',
    "[": "[", "]": "]", "{": "{", "}": "}", ";": ";",
}

# Characters that may continue a bare word (object paths, wildcards, buses)
WORD_CHARS = frozenset("_/.*?:|@^!<>=+,'-")
WORD_START = frozenset("_/.*?:|@^!<>=")


class Lexer:
    """
    Tokenizes SDC source text.

    Usage:
        lexer = Lexer(source_text)
        tokens = lexer.tokenize()
        if lexer.diagnostics:
            ...
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.brace_depth = 0
        self.bracket_depth = 0
        self.quote_open = False
        # closers seen with no opener: kind -> (count, line, col of the first)
        self.stray_closers: dict[str, tuple[int, int, int]] = {}
        self.diagnostics: list[LexDiagnostic] = []
        self._at_command = True

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_whitespace(self):
        """Skip spaces, tabs and backslash-newline continuations, but NOT newlines."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (" ", "\t", "\r", "\f", "\v"):
                self._advance()
            elif ch == "\\" and self._peek() == "\n":
                self._advance()
                self._advance()
            else:
                break

    def _skip_comment(self):
        """Discard a comment up to (not including) the end of line."""
        while self.pos < len(self.source) and self._current() != "\n":
            self._advance()

    def _read_quoted(self) -> Token:
        """Read a double-quoted string, translating backslash escapes."""
        start_line, start_col = self.line, self.col
        self._advance()  # consume opening "
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                return Token(TokenType.STRING, "".join(chars), start_line, start_col)
            if ch == "\\" and self.pos < len(self.source):
                next_ch = self._advance()
                if next_ch == "$":
                    # keep the escape so variable substitution leaves it literal
                    chars.append("\\$")
                elif next_ch == "\n":
                    chars.append(" ")
                else:
                    chars.append(ESCAPES.get(next_ch, next_ch))
            else:
                chars.append(ch)
        self.quote_open = True
        return Token(TokenType.STRING, "".join(chars), start_line, start_col)

    def _read_braced(self) -> Token:
        """Read a {...} word verbatim, honouring nesting and escaped braces."""
        start_line, start_col = self.line, self.col
        self._advance()  # consume opening {
        depth = 1
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == "\\" and self.pos < len(self.source):
                chars.append(ch)
                chars.append(self._advance())
                continue
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return Token(TokenType.STRING, "".join(chars), start_line, start_col)
            chars.append(ch)
        self.brace_depth += depth
        return Token(TokenType.LIST_START, "".join(chars), start_line, start_col)

    def _read_bracketed(self) -> Token:
        """Read a [...] sub-command as opaque text, brackets included."""
        start_line, start_col = self.line, self.col
        chars = [self._advance()]  # consume opening [
        depth = 1
        while self.pos < len(self.source):
            ch = self._advance()
            chars.append(ch)
            if ch == "\\" and self.pos < len(self.source):
                chars.append(self._advance())
            elif ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return Token(TokenType.STRING, "".join(chars), start_line, start_col)
        self.bracket_depth += depth
        return Token(TokenType.BRACKET_START, "".join(chars), start_line, start_col)

    def _read_variable(self) -> Token:
        """Read $name or ${name}; the token value is the bare name."""
        start_line, start_col = self.line, self.col
        self._advance()  # consume $
        chars = []
        if self._current() == "{":
            self._advance()
            while self.pos < len(self.source) and self._current() != "}":
                chars.append(self._advance())
            if self._current() == "}":
                self._advance()
            else:
                self.brace_depth += 1
        else:
            while self.pos < len(self.source):
                ch = self._current()
                if ch.isalnum() or ch == "_":
                    chars.append(self._advance())
                elif ch == ":" and self._peek() == ":":
                    chars.append(self._advance())
                    chars.append(self._advance())
                else:
                    break
        if not chars:
            return Token(TokenType.STRING, "$", start_line, start_col)
        return Token(TokenType.VARIABLE, "".join(chars), start_line, start_col)

    def _read_number(self) -> Token:
        """Read a numeric literal: sign, digits, one dot, one exponent, unit suffix."""
        start_line, start_col = self.line, self.col
        chars = []
        if self._current() == "-":
            chars.append(self._advance())
        has_dot = False
        has_exp = False
        while self.pos < len(self.source):
            ch = self._current()
            if ch.isdigit():
                chars.append(self._advance())
            elif ch == "." and not has_dot and not has_exp:
                has_dot = True
                chars.append(self._advance())
            elif ch in "eE" and not has_exp and self._exponent_follows():
                has_exp = True
                chars.append(self._advance())
                if self._current() in ("+", "-"):
                    chars.append(self._advance())
            else:
                break
        # unit suffix, e.g. 10.5ns
        while self.pos < len(self.source) and self._current().isalpha():
            chars.append(self._advance())
        # digit-led names such as 2x_clk or 0/1 are words, not numbers
        nxt = self._current()
        if nxt is not None and (nxt in "_/" or nxt.isdigit()):
            rest = self._read_word()
            return Token(rest.type, "".join(chars) + rest.value, start_line, start_col)
        return Token(TokenType.NUMBER, "".join(chars), start_line, start_col)

    def _exponent_follows(self) -> bool:
        nxt = self._peek()
        if nxt is not None and nxt.isdigit():
            return True
        after = self._peek(2)
        return nxt in ("+", "-") and after is not None and after.isdigit()

    def _read_flag(self) -> Token:
        """Read -name."""
        start_line, start_col = self.line, self.col
        chars = [self._advance()]  # consume -
        while self.pos < len(self.source):
            ch = self._current()
            if ch.isalnum() or ch == "_":
                chars.append(self._advance())
            else:
                break
        return Token(TokenType.FLAG, "".join(chars), start_line, start_col)

    def _read_word(self) -> Token:
        """Read a bare word: identifiers, hierarchical paths, wildcards, bus bits."""
        start_line, start_col = self.line, self.col
        chars = []
        depth = 0
        while self.pos < len(self.source):
            ch = self._current()
            if ch.isalnum() or ch in WORD_CHARS:
                chars.append(self._advance())
            elif ch == "\\" and self._peek() not in (None, "\n"):
                chars.append(self._advance())
                chars.append(self._advance())
            elif ch == "[":
                depth += 1
                chars.append(self._advance())
            elif ch == "]" and depth > 0:
                depth -= 1
                chars.append(self._advance())
            elif ch == "$" and (self._peek() == "{" or (self._peek() or " ").isalnum()
                                or self._peek() == "_"):
                chars.append(self._advance())
                if self._current() == "{":
                    while self.pos < len(self.source) and self._current() != "}":
                        chars.append(self._advance())
                    if self._current() == "}":
                        chars.append(self._advance())
            else:
                break
        token_type = TokenType.COMMAND if self._at_command else TokenType.STRING
        return Token(token_type, "".join(chars), start_line, start_col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of tokens ending with EOF."""
        tokens = []
        for token in self._iter_tokens():
            self._at_command = token.type in SEPARATORS
            tokens.append(token)
        tokens.append(Token(TokenType.EOF, "", self.line, self.col))
        self._report_unmatched(tokens)
        return tokens

    def _report_unmatched(self, tokens: list[Token]):
        """Add one ERROR token (just before EOF) and one diagnostic per open or stray delimiter kind."""
        open_counts = (
            ("unmatched_brace", self.brace_depth, "closing brace '}'", "closing braces '}'"),
            ("unmatched_bracket", self.bracket_depth, "closing bracket ']'", "closing brackets ']'"),
            ("unmatched_quote", int(self.quote_open), 'closing quote \'"\'', "closing quotes '\"'"),
        )
        for kind, count, singular, plural in open_counts:
            if count <= 0:
                continue
            what = singular if count == 1 else plural
            self._add_unmatched(tokens, kind, f"{count} missing {what} at end of file")

        stray_names = (
            ("unmatched_brace", "closing brace '}'", "closing braces '}'"),
            ("unmatched_bracket", "closing bracket ']'", "closing brackets ']'"),
        )
        for kind, singular, plural in stray_names:
            if kind not in self.stray_closers:
                continue
            count, line, col = self.stray_closers[kind]
            what = singular if count == 1 else plural
            self._add_unmatched(tokens, kind,
                                f"{count} unexpected {what} (first at line {line}, col {col})",
                                stray=True)

    def _add_unmatched(self, tokens: list[Token], kind: str, message: str, stray: bool = False):
        tokens.insert(len(tokens) - 1, Token(TokenType.ERROR, message, self.line, self.col))
        self.diagnostics.append(LexDiagnostic(kind, message, self.line, self.col, stray))

    def _note_stray(self, kind: str):
        count, line, col = self.stray_closers.get(kind, (0, self.line, self.col))
        self.stray_closers[kind] = (count + 1, line, col)

    def _iter_tokens(self) -> Iterator[Token]:
        """Generate tokens one at a time."""
        while self.pos < len(self.source):
            self._skip_whitespace()

            if self.pos >= len(self.source):
                break

            ch = self._current()
            nxt = self._peek()

            # Separators
            if ch == "\n":
                yield Token(TokenType.NEWLINE, "\\n", self.line, self.col)
                self._advance()
                continue

            if ch == ";":
                yield Token(TokenType.SEMICOLON, ";", self.line, self.col)
                self._advance()
                continue

            # Comments
            if ch == "#":
                self._skip_comment()
                continue

            if ch == '"':
                yield self._read_quoted()
                continue

            if ch == "{":
                yield self._read_braced()
                continue

            if ch == "[":
                yield self._read_bracketed()
                continue

            # Stray closers
            if ch == "}":
                self._note_stray("unmatched_brace")
                yield Token(TokenType.LIST_END, ch, self.line, self.col)
                self._advance()
                continue

            if ch == "]":
                self._note_stray("unmatched_bracket")
                yield Token(TokenType.BRACKET_END, ch, self.line, self.col)
                self._advance()
                continue

            if ch == "$":
                yield self._read_variable()
                continue

            # Negative numbers: - followed by digit (or .digit)
            if ch == "-" and nxt is not None and (
                    nxt.isdigit() or (nxt == "." and (self._peek(2) or "").isdigit())):
                yield self._read_number()
                continue

            if ch == "-":
                yield self._read_flag()
                continue

            if ch.isdigit() or (ch == "." and nxt is not None and nxt.isdigit()):
                yield self._read_number()
                continue

            if ch.isalpha() or ch in WORD_START or (ch == "\\" and nxt is not None):
                yield self._read_word()
                continue

            # Unknown character: skip
            self._advance()
