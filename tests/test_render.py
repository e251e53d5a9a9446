import pytest

from bufcsv.core.buffer import RowBuffer
from bufcsv.core.errors import NotStringableError
from bufcsv.core.render import enquote, render_header, render_rows, render_value
from bufcsv.core.schema import FieldSchema, FieldSpec
from bufcsv.core.utils import build_options


def _make_opts(**kw):
    kw.setdefault("path", "out.csv")
    kw.setdefault("eol", "\n")
    return build_options(kw)


class _Unprintable:
    def __str__(self):
        raise RuntimeError("boom")


def test_enquote_escapes_only_first_quote():
    opts = _make_opts()

    assert enquote('A"B', opts) == '"A\\"B"'
    assert enquote('A"B"C', opts) == '"A\\"B"C"'


def test_render_value_none_is_null_token_unquoted():
    opts = _make_opts(null_value="N/A")

    assert render_value(None, FieldSpec(quoted=True), opts) == "N/A"


def test_render_value_unquoted_field_uses_plain_text():
    opts = _make_opts()

    assert render_value(1564, FieldSpec(quoted=False), opts) == "1564"
    assert render_value(1564, FieldSpec(quoted=True), opts) == '"1564"'


def test_render_value_raises_not_stringable():
    opts = _make_opts()

    with pytest.raises(NotStringableError):
        render_value(_Unprintable(), FieldSpec(), opts)


def test_header_quotes_every_name_regardless_of_field_setting():
    opts = _make_opts(delimiter=";")
    schema = FieldSchema({"ts": FieldSpec(quoted=False), "Name": FieldSpec()})

    assert render_header(schema, opts) == '"ts";"Name"\n'


def test_rows_pad_short_positional_rows_with_null():
    opts = _make_opts()
    schema = FieldSchema({"a": FieldSpec(), "b": FieldSpec(), "c": FieldSpec()})

    text = render_rows([["x"], ["x", None, "z"]], schema, opts)

    assert text == '"x",NULL,NULL\n"x",NULL,"z"\n'


def test_rows_keep_excess_positional_values():
    opts = _make_opts()
    schema = FieldSchema({"a": FieldSpec(quoted=False)})

    assert render_rows([[1, 2, 3]], schema, opts) == '1,"2","3"\n'


def test_rows_rendered_in_buffer_order_against_current_schema():
    opts = _make_opts()
    buf = RowBuffer(FieldSchema())
    buf.append({"Name": "Albert Einstein", "Expertise": "Relativity"})
    buf.append({"Name": "Galileo Galilei", "Expertise": "Gravity", "Birthyear": 1564})

    text = render_header(buf.schema, opts) + render_rows(buf.rows, buf.schema, opts)

    assert text == (
        '"Name","Expertise","Birthyear"\n'
        '"Albert Einstein","Relativity",NULL\n'
        '"Galileo Galilei","Gravity","1564"\n'
    )


def test_custom_quote_and_escape():
    opts = _make_opts(quote="'", escape="'")

    assert enquote("it's", opts) == "'it''s'"
