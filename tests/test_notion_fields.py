from proposal_engine.adapters.notion_fields import (
    DateValue,
    MultiSelectValue,
    RichTextValue,
    SelectValue,
    TitleValue,
    Unsupported,
    as_categories,
    as_date,
    as_text,
    as_title,
    decode_property,
)


def rich(*parts):
    return [{"plain_text": part} for part in parts]


PROPS = {
    "title": {"type": "title", "title": rich("봄 ", "컨퍼런스 ")},
    "text": {"type": "rich_text", "rich_text": rich("홍보, 디자인 ,", " ")},
    "select": {"type": "select", "select": {"name": " 세미나 "}},
    "empty_select": {"type": "select", "select": None},
    "multi": {"type": "multi_select", "multi_select": [{"name": "워크숍"}, {"name": " "}, {"name": "세미나"}]},
    "date": {"type": "date", "date": {"start": "2025-05-10", "end": None}},
    "empty_date": {"type": "date", "date": None},
    "number": {"type": "number", "number": 3},
}


def test_decode_known_shapes():
    assert decode_property(PROPS, "title") == TitleValue(text="봄 컨퍼런스")
    assert decode_property(PROPS, "text") == RichTextValue(text="홍보, 디자인 ,")
    assert decode_property(PROPS, "select") == SelectValue(name=" 세미나 ")
    assert decode_property(PROPS, "multi") == MultiSelectValue(names=("워크숍", " ", "세미나"))
    assert decode_property(PROPS, "date") == DateValue(start="2025-05-10")


def test_unknown_and_missing_shapes_decode_to_unsupported():
    assert decode_property(PROPS, "number") == Unsupported(type="number")
    assert decode_property(PROPS, "missing") == Unsupported(type=None)
    assert decode_property({"broken": "not a dict"}, "broken") == Unsupported(type=None)


def test_accessors_return_empty_for_other_shapes():
    assert as_title(decode_property(PROPS, "text")) == ""
    assert as_text(decode_property(PROPS, "title")) == ""
    assert as_date(decode_property(PROPS, "select")) is None
    assert as_categories(decode_property(PROPS, "number")) == []


def test_text_from_rich_text_or_select():
    assert as_text(decode_property(PROPS, "text")) == "홍보, 디자인 ,"
    assert as_text(decode_property(PROPS, "select")) == "세미나"
    assert as_text(decode_property(PROPS, "empty_select")) == ""


def test_categories_are_trimmed_and_non_empty():
    assert as_categories(decode_property(PROPS, "multi")) == ["워크숍", "세미나"]
    assert as_categories(decode_property(PROPS, "select")) == ["세미나"]
    assert as_categories(decode_property(PROPS, "empty_select")) == []
    assert as_categories(decode_property(PROPS, "text")) == ["홍보", "디자인"]


def test_dates():
    assert as_date(decode_property(PROPS, "date")) == "2025-05-10"
    assert as_date(decode_property(PROPS, "empty_date")) is None
