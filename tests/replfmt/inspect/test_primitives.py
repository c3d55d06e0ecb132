import pytest

from replfmt.inspect import PrimitiveFormatterOptions
from replfmt.inspect.primitives import EscapeSequence, PrimitiveFormatter, RUN_LENGTH


primitives = PrimitiveFormatter()
python_escapes = PrimitiveFormatterOptions()
code_points = PrimitiveFormatterOptions(include_code_points=True)


@pytest.mark.parametrize("base", ["dec", "hex"])
@pytest.mark.parametrize(
    "value", [0, 42, -42, 1_234_567_890_123, -1_234_567_890_123, 2**130]
)
def test_int(value, base):
    options = PrimitiveFormatterOptions(use_hexadecimal_numbers=(base == "hex"))
    result = primitives.format_primitive(value, options)
    if base == "hex":
        assert "0x" in result
        assert int(result, 16) == value
    else:
        assert result == repr(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0x00000000"),
        (42, "0x0000002a"),
        (-42, "-0x0000002a"),
        (0xFFFFFFFF, "0xffffffff"),
        (0x1_0000_0000, "0x0000000100000000"),
        (2**64, "0x00000000000000010000000000000000"),
    ],
)
def test_int_hex_padding(value, expected):
    options = PrimitiveFormatterOptions(use_hexadecimal_numbers=True)
    assert primitives.format_int(value, options) == expected


def test_int_hex_wide():
    options = PrimitiveFormatterOptions(use_hexadecimal_numbers=True)
    digits = primitives.format_int(2**130, options)[2:]
    assert len(digits) % 8 == 0
    assert len(digits) > 32


@pytest.mark.parametrize("hex", [False, True])
@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "None"),
        (True, "True"),
        (False, "False"),
        (1.5, "1.5"),
        (float("nan"), "nan"),
        (1 + 2j, "(1+2j)"),
        (..., "Ellipsis"),
    ],
)
def test_radix_independent(value, expected, hex):
    options = PrimitiveFormatterOptions(use_hexadecimal_numbers=hex)
    assert primitives.format_primitive(value, options) == expected


@pytest.mark.parametrize(
    "value",
    [
        "",
        "abc",
        "it's",
        'say "hi"',
        "it's \"both\"",
        "tab\tnew\nline\rreturn",
        "back\\slash",
        "bell\x07",
        "del\x7f",
        "nbsp\xa0",
        "zero\u200bwidth",
        "tag\U000e0001",
        "lone\ud800surrogate",
        "caf\xe9 中文 \U0001f600",
    ],
)
def test_str_like_repr(value):
    assert primitives.format_primitive(value, python_escapes) == repr(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("bell\x07", "'bell\\u{0007}'"),
        ("zero\u200bwidth", "'zero\\u{200B}width'"),
        ("tag\U000e0001", "'tag\\u{E0001}'"),
        ("a\nb", "'a\\nb'"),
        ("caf\xe9", "'caf\xe9'"),
    ],
)
def test_str_code_points(value, expected):
    assert primitives.format_primitive(value, code_points) == expected


@pytest.mark.parametrize(
    "value, include_code_points, expected",
    [
        ("it's", False, "it's"),
        ('say "hi"', False, 'say "hi"'),
        ("a\x07b", False, "a\\x07b"),
        ("a\x07b", True, "a\\u{0007}b"),
        ("tab\tnew\n", True, "tab\\tnew\\n"),
        ("back\\slash", False, "back\\\\slash"),
    ],
)
def test_str_omit_quotes(value, include_code_points, expected):
    options = PrimitiveFormatterOptions(
        omit_string_quotes=True, include_code_points=include_code_points
    )
    assert primitives.format_primitive(value, options) == expected


def test_str_omit_quotes_escapes_are_tokens():
    options = PrimitiveFormatterOptions(omit_string_quotes=True)
    pieces = list(primitives.iter_primitive_tokens("a\x07", options))
    assert pieces == ["a", "\\x07"]
    assert isinstance(pieces[1], EscapeSequence)


def test_str_escapes_are_tokens():
    pieces = list(primitives.iter_primitive_tokens("a\x07b", python_escapes))
    assert pieces == ["'", "a", "\\x07", "b", "'"]
    assert [isinstance(piece, EscapeSequence) for piece in pieces] == [
        False,
        False,
        True,
        False,
        False,
    ]


def test_str_long_runs_are_chunked():
    value = "x" * (2 * RUN_LENGTH + 88)
    pieces = list(primitives.iter_primitive_tokens(value, python_escapes))
    assert [len(piece) for piece in pieces] == [1, RUN_LENGTH, RUN_LENGTH, 88, 1]
    assert "".join(pieces) == repr(value)


@pytest.mark.parametrize(
    "value",
    [
        b"",
        b"abc",
        b"\x00\xff\n\t\r\\",
        b"'",
        b'"',
        b"'\"",
        bytearray(b"x\x00y"),
        bytearray(),
    ],
)
def test_bytes_like_repr(value):
    assert primitives.format_primitive(value, python_escapes) == repr(value)
    assert primitives.format_primitive(value, code_points) == repr(value)


def test_int_derived():
    class CustomInt(int):
        def __repr__(self):
            return f"CustomInt({int(self)})"

    assert primitives.format_primitive(CustomInt(42), python_escapes) is None


@pytest.mark.parametrize("value", [[1], object(), int, "abc".encode().decode])
def test_non_primitive(value):
    assert primitives.format_primitive(value, python_escapes) is None
    assert primitives.iter_primitive_tokens(value, python_escapes) is None
