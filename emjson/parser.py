"""Incremental JSON object parser and serializer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .action import ActionContext, ActionMachine, Flow, FlowCode, ReturnCode, State, Token
from .data import DataType, JsonData, ParseStatus, TokenType
from .matcher import Matcher, MatchStatus, TokenDFA

_BACK = Flow(FlowCode.BACK_TO_PREV)
_PANIC = Flow(FlowCode.PANIC)


class ParseError(Exception):
    """Raised when text cannot be parsed; ``index`` is the position reached."""

    status: ParseStatus = ParseStatus.JSON_SYNTAX_ERROR

    def __init__(self, message: str, index: int) -> None:
        super().__init__(message)
        self.index = index


class IncompleteInputError(ParseError):
    """The text holds an unknown character or ends inside a token."""

    status = ParseStatus.MORE_INPUT_OR_UNKNOWN_CHAR


class JsonSyntaxError(ParseError):
    """The tokens do not form a valid object."""

    status = ParseStatus.JSON_SYNTAX_ERROR


class _StructureError(Exception):
    """Internal signal that the token sequence is malformed."""


@dataclass
class ParseResult:
    """State of the parser after a successful call to :meth:`JsonStreamParser.parse`.

    ``objects`` lists the top-level objects plus any still being built;
    the first ``parsed_len`` of them are complete and will not change.
    """

    status: ParseStatus
    index: int
    objects: list[JsonData] = field(default_factory=list)
    parsed_len: int = 0

    @property
    def completed(self) -> list[JsonData]:
        """The top-level objects that are fully parsed."""
        return self.objects[: self.parsed_len]


def _build_lexer() -> Matcher:
    lexer = Matcher()

    string = TokenDFA(start_state="0", token_identifier=TokenType.STRING)
    string.dfa["0"] = {'"': "1"}
    string.add_ascii_range("1", chr(0), chr(127), "1")
    string.dfa["1"]['"'] = "2"
    string.dfa["1"]["\\"] = "3"
    string.add_ascii_range("3", chr(0), chr(127), "1")
    string.add_final_state("2")
    lexer.insert_token(string)

    number = TokenDFA(start_state="0", token_identifier=TokenType.NUMBER)
    number.add_ascii_range("0", "0", "9", "1")
    number.add_ascii_range("1", "0", "9", "1")
    number.dfa["1"]["."] = "2"
    number.add_ascii_range("2", "0", "9", "3")
    number.add_ascii_range("3", "0", "9", "3")
    number.add_final_state("1")
    number.add_final_state("3")
    lexer.insert_token(number)

    words = [
        ("null", TokenType.NULL),
        ("[", TokenType.OP_BRACKET),
        ("]", TokenType.CLOSE_BRACKET),
        ("{", TokenType.OP_BRACE),
        ("}", TokenType.CLOSE_BRACE),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        (":", TokenType.COLON),
        (",", TokenType.COMMA),
    ]
    for word, kind in words:
        lexer.create_word_token(word, kind)
    for blank in (" ", "\n", "\t"):
        lexer.create_word_token(blank, TokenType.IGNORES, True)
    return lexer


class JsonStreamParser(ActionMachine):
    """Parses a stream of top-level JSON objects fed in one or more pieces.

    Pieces may be split anywhere between tokens; state carries over from one
    call of :meth:`parse` to the next. After an error call :meth:`reset`.
    """

    def __init__(self) -> None:
        super().__init__(machine={})
        self._lexer = _build_lexer()
        for state in (
            State.OBJECT_HANDLER,
            State.BOOLEAN_NULL_HANDLER,
            State.TYPE_CHECK,
            State.ARRAY_HANDLER,
            State.NUMBER_HANDLER,
            State.STRING_HANDLER,
            State.KEY_HANDLER,
        ):
            self.add_special_dfa(state, {})
        self._handlers: dict[State, Callable[[int, list[Token]], Flow]] = {
            State.KEY_HANDLER: self._key,
            State.TYPE_CHECK: self._type_check,
            State.BOOLEAN_NULL_HANDLER: self._boolean_null,
            State.NUMBER_HANDLER: self._number,
            State.STRING_HANDLER: self._string,
            State.OBJECT_HANDLER: self._object,
            State.MAIN_OBJ: self._main,
            State.ARRAY_HANDLER: self._array,
        }
        self._objects: list[JsonData] = []
        self._fields: list[Optional[str]] = []
        self._tokens: list[Token] = []
        self._index = 0
        self._parsed_len = 0
        self._done = False
        self._ctx: ActionContext = self.default_context(State.MAIN_OBJ)

    @property
    def objects(self) -> list[JsonData]:
        """Top-level objects, complete ones first, followed by any in progress."""
        return list(self._objects)

    @property
    def parsed_len(self) -> int:
        """How many of :attr:`objects` are complete."""
        return self._parsed_len

    @property
    def is_complete(self) -> bool:
        """Whether no object is left half-parsed."""
        return len(self._objects) == self._parsed_len and not self._fields and not self._ctx.dfa_stack

    def reset(self) -> None:
        """Discard all parsed data and pending tokens."""
        self._objects.clear()
        self._fields.clear()
        self._tokens.clear()
        self._index = 0
        self._parsed_len = 0
        self._done = False
        self._ctx = self.default_context(State.MAIN_OBJ)

    def parse(self, text: str, index: int = 0) -> ParseResult:
        """Feed ``text`` from ``index`` on to the parser.

        Raises :class:`IncompleteInputError` at an unknown character or a
        token cut short, and :class:`JsonSyntaxError` on malformed structure.
        """
        position = index
        while True:
            match = self._lexer.get_token(text, position)
            if match.status is MatchStatus.NO_MATCHED_TOKEN:
                raise IncompleteInputError(
                    f"unknown character or unfinished token at index {match.index}", match.index
                )
            position = match.index
            if match.value and match.token_identifier != TokenType.IGNORES:
                self._tokens.append(Token(TokenType(match.token_identifier), match.value))
            if match.status is MatchStatus.END_OF_FILE:
                break

        while self._index < len(self._tokens):
            self._done = False
            result = self.run(self._tokens, State.MAIN_OBJ, self._index, self._ctx)
            self._index = result.index
            if result.status is ReturnCode.PANIC_WHILE_PROCESSING:
                raise JsonSyntaxError(f"invalid JSON structure in input ending at index {position}", position)
            if result.status is ReturnCode.ALL_REDUCTIONS_ARE_COMPLETED and self._done:
                del self._tokens[: self._index]
                self._index = 0
                self._parsed_len += 1
                self._ctx = self.default_context(State.MAIN_OBJ)

        return ParseResult(ParseStatus.SUCCESS, position, list(self._objects), self._parsed_len)

    def action(self, index: int, tokens: list[Token], state: State) -> Flow:
        """Handle ``tokens[index]`` in parser state ``state``."""
        handler = self._handlers.get(state)
        if handler is None:
            return Flow(FlowCode.SAFE)
        try:
            return handler(index, tokens)
        except _StructureError:
            return _PANIC

    def _store(self, value: JsonData) -> None:
        if not self._fields or len(self._objects) <= self._parsed_len:
            raise _StructureError
        name = self._fields.pop()
        container = self._objects[-1].value
        if name is None:
            if not isinstance(container, list):
                raise _StructureError
            container.append(value)
        else:
            if not isinstance(container, dict):
                raise _StructureError
            container[name] = value

    def _close_container(self, kind: type) -> None:
        if len(self._objects) - self._parsed_len < 2:
            raise _StructureError
        nested = self._objects[-1]
        if not isinstance(nested.value, kind):
            raise _StructureError
        self._objects.pop()
        self._store(nested)

    def _type_check(self, index: int, tokens: list[Token]) -> Flow:
        kind = tokens[index].type
        if kind in (TokenType.FALSE, TokenType.TRUE, TokenType.NULL):
            return Flow(FlowCode.GO_TO_SP_DFA, State.BOOLEAN_NULL_HANDLER, advance=False)
        if kind is TokenType.NUMBER:
            return Flow(FlowCode.GO_TO_SP_DFA, State.NUMBER_HANDLER, advance=False)
        if kind is TokenType.STRING:
            return Flow(FlowCode.GO_TO_SP_DFA, State.STRING_HANDLER, advance=False)
        if kind is TokenType.OP_BRACE:
            return Flow(FlowCode.GO_TO_SP_DFA, State.OBJECT_HANDLER, advance=False)
        if kind is TokenType.OP_BRACKET:
            return Flow(FlowCode.GO_TO_SP_DFA, State.ARRAY_HANDLER, advance=False)
        if kind in (TokenType.COLON, TokenType.COMMA, TokenType.CLOSE_BRACE, TokenType.CLOSE_BRACKET):
            return Flow(FlowCode.BACK_TO_PREV, advance=False)
        return Flow(FlowCode.PANIC, advance=False)

    def _boolean_null(self, index: int, tokens: list[Token]) -> Flow:
        kind = tokens[index].type
        values = {TokenType.TRUE: True, TokenType.FALSE: False, TokenType.NULL: None}
        if kind not in values:
            raise _StructureError
        self._store(JsonData(values[kind]))
        return _BACK

    def _number(self, index: int, tokens: list[Token]) -> Flow:
        self._store(JsonData(float(tokens[index].value)))
        return _BACK

    def _string(self, index: int, tokens: list[Token]) -> Flow:
        self._store(JsonData(tokens[index].value[1:-1]))
        return _BACK

    def _key(self, index: int, tokens: list[Token]) -> Flow:
        token = tokens[index]
        if token.type is not TokenType.STRING:
            return _PANIC
        self._fields.append(token.value[1:-1])
        return _BACK

    def _object(self, index: int, tokens: list[Token]) -> Flow:
        kind = tokens[index].type
        if kind is TokenType.OP_BRACE:
            self._objects.append(JsonData({}))
            return Flow(FlowCode.GO_TO_SP_DFA, State.KEY_HANDLER)
        if kind is TokenType.COMMA:
            return Flow(FlowCode.GO_TO_SP_DFA, State.KEY_HANDLER)
        if kind is TokenType.COLON:
            return Flow(FlowCode.GO_TO_SP_DFA, State.TYPE_CHECK)
        if kind is TokenType.CLOSE_BRACE:
            self._close_container(dict)
            return _BACK
        return _PANIC

    def _array(self, index: int, tokens: list[Token]) -> Flow:
        kind = tokens[index].type
        previous = tokens[index - 1].type if index > 0 else None
        if kind is TokenType.OP_BRACKET:
            self._fields.append(None)
            self._objects.append(JsonData([]))
            return Flow(FlowCode.GO_TO_SP_DFA, State.TYPE_CHECK)
        if kind is TokenType.COMMA:
            if previous in (TokenType.COMMA, TokenType.OP_BRACKET):
                raise _StructureError
            self._fields.append(None)
            return Flow(FlowCode.GO_TO_SP_DFA, State.TYPE_CHECK)
        if kind is TokenType.CLOSE_BRACKET:
            if previous is TokenType.COMMA:
                raise _StructureError
            if previous is TokenType.OP_BRACKET:
                if not self._fields or self._fields[-1] is not None:
                    raise _StructureError
                self._fields.pop()
            self._close_container(list)
            return _BACK
        return _PANIC

    def _main(self, index: int, tokens: list[Token]) -> Flow:
        kind = tokens[index].type
        is_open = len(self._objects) > self._parsed_len
        if kind is TokenType.OP_BRACE:
            if is_open:
                raise _StructureError
            self._objects.append(JsonData({}))
            return Flow(FlowCode.GO_TO_SP_DFA, State.KEY_HANDLER)
        if kind is TokenType.COMMA:
            if not is_open or self._fields:
                raise _StructureError
            return Flow(FlowCode.GO_TO_SP_DFA, State.KEY_HANDLER)
        if kind is TokenType.COLON:
            if not is_open or len(self._fields) != 1:
                raise _StructureError
            return Flow(FlowCode.GO_TO_SP_DFA, State.TYPE_CHECK)
        if kind is TokenType.CLOSE_BRACE:
            if not is_open or self._fields:
                raise _StructureError
            self._done = True
            return Flow(FlowCode.COMPILE_DONE)
        return _PANIC


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def to_json(data: JsonData) -> str:
    """Serialize an object value compactly; any other kind of value gives ``""``."""
    if data.type is not DataType.OBJECT:
        return ""
    if not isinstance(data.value, dict):
        return '{"<ERROR:TopLevelVariantAccess>":"true"}'
    members = (f'"{_escape(key)}":{_serialize(value)}' for key, value in data.value.items())
    return "{" + ",".join(members) + "}"


def _serialize(data: JsonData) -> str:
    kind = data.type
    value = data.value
    mismatch = '"<ERROR:VariantAccess>"'
    if kind is DataType.NUMBER:
        if not isinstance(value, float):
            return mismatch
        return f"{value:g}"
    if kind is DataType.STRING:
        if not isinstance(value, str):
            return mismatch
        return f'"{_escape(value)}"'
    if kind is DataType.BOOLEAN:
        if not isinstance(value, bool):
            return mismatch
        return "true" if value else "false"
    if kind is DataType.NULLVAL:
        return "null"
    if kind is DataType.ARRAY:
        if not isinstance(value, list):
            return mismatch
        return "[" + ",".join(_serialize(item) for item in value) + "]"
    if kind is DataType.OBJECT:
        return to_json(data)
    return '"<ERROR:UnknownDataType>"'