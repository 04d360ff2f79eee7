# emjson

A small parser for a stream of top-level JSON objects. Give it one or more
complete objects in a single string, or give it the input in pieces: the parser
keeps its state from one call to the next. Parsed values can be written back as
compact JSON text.

## Installing

```
pip install .
```

## Parsing

```python
from emjson.parser import JsonStreamParser, to_json

parser = JsonStreamParser()
result = parser.parse('{"name":"Example","version":1}{"enabled":true}')

print(len(result.objects))     # 2
print(result.parsed_len)       # 2 objects are complete
last = result.completed[-1]
print(last.as_object()["enabled"].as_bool())   # True
```

`parse(text, index=0)` returns a `ParseResult` with:

- `status`: `ParseStatus.SUCCESS`;
- `index`: the position in `text` the lexer reached;
- `objects`: the top-level objects, complete ones first, followed by one still
  being built, if any;
- `parsed_len`: how many of `objects` are complete;
- `completed`: just the complete objects.

The parser itself also offers `objects`, `parsed_len` and `is_complete` (true
when no object is left half-parsed).

An object may be split between tokens; pass the pieces one after the other to
the same parser:

```python
parser = JsonStreamParser()
parser.parse('{"items":[10,"text",true,null,')
result = parser.parse('{"a":1}],"version":1}')
print(to_json(result.completed[-1]))
# {"items":[10,"text",true,null,{"a":1}],"version":1}
```

### Errors

Errors are raised as exceptions, each carrying the `index` reached and a
`status` from `ParseStatus`:

- `IncompleteInputError`: the text holds a character the lexer does not know,
  or ends inside a token (for example an unterminated string).
- `JsonSyntaxError`: the tokens do not make up a valid object.

Both derive from `ParseError`. After an error, call `parser.reset()` to discard
all parsed data and pending tokens.

### Accepted grammar

- The top level must be an object; several objects may follow one another.
- Numbers are unsigned decimals such as `10` or `456.789`; there is no sign
  and no exponent.
- Strings hold ASCII characters and are kept as written, without unescaping.
- Spaces, tabs and newlines between tokens are ignored.

### Values

Every value is a `JsonData` from `emjson.data`, tagged with a `DataType`
(`NUMBER`, `STRING`, `ARRAY`, `OBJECT`, `NULLVAL`, `BOOLEAN`). Numbers are
stored as floats. Accessors:

- `as_number()`
- `as_string()`
- `as_array()`
- `as_bool()`
- `as_object()`

Each returns `None` when the value is of another kind; `is_null()` tells
whether the value is null. A `JsonData` can be built from plain Python values,
e.g. `JsonData({"a": [1, "x", None]})`.

### Serializing

`to_json(data)` writes an object value compactly. Numbers are written with up
to six significant digits, and `"` and `\` in strings and keys are escaped. A
value that is not an object gives an empty string.

## Lower-level pieces

- `emjson.matcher`: `Matcher`, a longest-match lexer built from `TokenDFA`
  automata (`create_word_token`, `insert_token_as_str`, `get_token`).
- `emjson.action`: `ActionMachine`, an abstract token-driven automaton whose
  states are handled by an `action` callback, with nested special automata and
  a resumable `ActionContext`.

## Command line

```
emjson [FILES ...] [--summary]
```

Feeds the named files, one after another, to a single parser (or standard
input when no file is given) and prints each complete object on its own line
as compact JSON. With `--summary` it then prints the number of objects held and
the number parsed, as `N , M`. It exits with status 1 on a read error, a parse
error, or input that ends inside an object.