"""Tests for decoding formatter output."""

from anagnosis.format.overstrike import decode, decode_line


def _partitioned(line):
    for i in range(line.length):
        flags = [line.reg[i], line.bold[i], line.italic[i], line.uline[i]]
        if flags.count(True) != 1:
            return False
    return True


def test_plain_line():
    """Test that text without encoding is regular."""
    line = decode_line("hello")
    assert line.text == "hello"
    assert line.length == 5
    assert all(line.reg)
    assert not any(line.bold)


def test_bold_overstrike():
    """Test X\\bX decodes as bold X."""
    line = decode_line("N\bNA\bAM\bME\bE x")
    assert line.text == "NAME x"
    assert line.bold[:4] == [True] * 4
    assert line.reg[4:] == [True, True]
    assert _partitioned(line)


def test_underline_overstrike():
    """Test _\\bX decodes as underlined X."""
    line = decode_line("a _\bf_\bi_\bl_\be")
    assert line.text == "a file"
    assert line.uline == [False, False, True, True, True, True]
    assert _partitioned(line)


def test_bold_underscore_is_bold():
    """Test that _\\b_ is a bold underscore, not an underline."""
    line = decode_line("_\b_")
    assert line.text == "_"
    assert line.bold == [True]


def test_bold_underline_counts_as_bold():
    """Test _\\bX\\bX decodes as bold."""
    line = decode_line("_\bX\bX")
    assert line.text == "X"
    assert line.bold == [True]
    assert line.uline == [False]


def test_sgr_escapes():
    """Test ANSI SGR bold/italic/underline and resets."""
    line = decode_line("\x1b[1mB\x1b[0m \x1b[3mI\x1b[23m \x1b[4mU\x1b[24m.")
    assert line.text == "B I U."
    assert line.bold[0]
    assert line.italic[2]
    assert line.uline[4]
    assert line.reg[5]
    assert _partitioned(line)


def test_non_sgr_csi_dropped():
    """Test that other escape sequences leave no trace."""
    line = decode_line("a\x1b[2Kb")
    assert line.text == "ab"


def test_trailing_backspace_dropped():
    """Test lenient decoding of a stray trailing backspace."""
    line = decode_line("B\bBx\b")
    assert line.text == "Bx"
    assert line.bold == [True, False]
    assert line.reg == [False, True]


def test_leading_backspace_dropped():
    """Test a backspace with nothing before it."""
    line = decode_line("\bab")
    assert line.text == "ab"
    assert _partitioned(line)


def test_overstruck_glyph_keeps_later_char():
    """Test o\\b+ (a bullet) keeps the second glyph."""
    line = decode_line("o\b+ item")
    assert line.text == "+ item"


def test_empty_line():
    """Test empty input gives empty tracks."""
    line = decode_line("")
    assert line.length == 0
    assert line.reg == [] and line.bold == [] and line.italic == [] and line.uline == []


def test_decode_splits_lines():
    """Test a blob decodes into one line per input line."""
    lines = decode("L\bLS\bS(1)\n\n       ls - list\n")
    assert [ln.text for ln in lines] == ["LS(1)", "", "       ls - list"]
    assert lines[0].bold[:2] == [True, True]


def test_decode_empty():
    """Test decoding nothing."""
    assert decode("") == []
