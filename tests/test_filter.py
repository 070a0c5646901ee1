import pytest

from dstore.filter import FilterKeyCompare, FilterKeyPrefix, FilterValueCompare, Op
from dstore.naive import naive_filter
from dstore.query import Entry, Query, results_with_entries

SAMPLE_KEYS = [
    "/ab/c",
    "/ab/cd",
    "/ab/ef",
    "/ab/fg",
    "/a",
    "/abce",
    "/abcf",
    "/ab",
]


def _filtered_keys(flt, keys):
    results = results_with_entries(Query(), [Entry(k) for k in keys])
    return [e.key for e in naive_filter(results, flt).rest()]


def test_filter_key_compare_equal():
    assert _filtered_keys(FilterKeyCompare(Op.EQUAL, "/ab"), SAMPLE_KEYS) == ["/ab"]


def test_filter_key_compare_greater_than():
    assert _filtered_keys(FilterKeyCompare(Op.GREATER_THAN, "/ab"), SAMPLE_KEYS) == [
        "/ab/c",
        "/ab/cd",
        "/ab/ef",
        "/ab/fg",
        "/abce",
        "/abcf",
    ]


def test_filter_key_compare_less_than_or_equal():
    assert _filtered_keys(
        FilterKeyCompare(Op.LESS_THAN_OR_EQUAL, "/ab"), SAMPLE_KEYS
    ) == ["/a", "/ab"]


def test_filter_key_prefix():
    assert _filtered_keys(FilterKeyPrefix("/a"), SAMPLE_KEYS) == [
        "/ab/c",
        "/ab/cd",
        "/ab/ef",
        "/ab/fg",
        "/a",
        "/abce",
        "/abcf",
        "/ab",
    ]
    assert _filtered_keys(FilterKeyPrefix("/ab/"), SAMPLE_KEYS) == [
        "/ab/c",
        "/ab/cd",
        "/ab/ef",
        "/ab/fg",
    ]


@pytest.mark.parametrize(
    "op,expected",
    [
        (Op.EQUAL, [b"b"]),
        (Op.NOT_EQUAL, [b"a", b"c"]),
        (Op.LESS_THAN, [b"a"]),
        (Op.LESS_THAN_OR_EQUAL, [b"a", b"b"]),
        (Op.GREATER_THAN, [b"c"]),
        (Op.GREATER_THAN_OR_EQUAL, [b"b", b"c"]),
    ],
)
def test_filter_value_compare(op, expected):
    flt = FilterValueCompare(op, b"b")
    entries = [Entry("/x", value=v) for v in (b"a", b"b", b"c")]
    assert [e.value for e in entries if flt.filter(e)] == expected


def test_op_given_as_string_is_accepted():
    assert FilterKeyCompare(">=", "/a").op is Op.GREATER_THAN_OR_EQUAL


def test_unknown_op_raises():
    with pytest.raises(ValueError, match="unknown operation"):
        FilterKeyCompare("~", "/a")
    with pytest.raises(ValueError):
        FilterValueCompare("<>", b"a")


def test_string_forms():
    assert str(FilterKeyCompare(Op.GREATER_THAN, "/foo/bar")) == 'KEY > "/foo/bar"'
    assert str(FilterValueCompare(Op.EQUAL, b"abc")) == 'VALUE == "abc"'
    assert str(FilterKeyPrefix("/a")) == 'PREFIX("/a")'


def test_filters_render_inside_query_string():
    q = Query(
        filters=[
            FilterKeyCompare(Op.GREATER_THAN, "/foo/bar"),
            FilterKeyCompare(Op.LESS_THAN, "/foo/bar"),
        ]
    )
    assert str(q) == 'SELECT keys,vals FILTER [KEY > "/foo/bar", KEY < "/foo/bar"]'