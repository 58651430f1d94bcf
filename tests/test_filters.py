import pytest

from jobhub.errors import ValidationError
from jobhub.filters import JobFilter, parse_job_filter, parse_pagination


def test_blank_and_missing_values_mean_no_constraint():
    flt = parse_job_filter({"search": "  ", "location": "", "remote": None})
    assert flt == JobFilter()
    assert flt.is_empty


def test_values_are_stripped_and_category_lowercased():
    flt = parse_job_filter({"search": " python ", "location": "Geneva", "category": "NGO"})
    assert flt.search == "python"
    assert flt.location == "Geneva"
    assert flt.category == "ngo"
    assert not flt.is_empty


@pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), ("false", None), ("1", None), (None, None)])
def test_remote_only_set_for_true(raw, expected):
    assert parse_job_filter({"remote": raw}).remote is expected


def test_unknown_category_is_rejected():
    with pytest.raises(ValidationError) as exc:
        parse_job_filter({"category": "development"})
    assert exc.value.status_code == 400
    assert "development" in exc.value.message


def test_filter_struct_validates_category_directly():
    with pytest.raises(ValidationError):
        JobFilter(category="startup")


def test_pagination_defaults():
    assert parse_pagination({}) == (1, 30)


def test_pagination_clamps_limit():
    assert parse_pagination({"page": "3", "limit": "500"}, default_limit=30, max_limit=100) == (3, 100)


@pytest.mark.parametrize("args", [{"page": "0"}, {"page": "-2"}, {"limit": "0"}, {"page": "abc"}, {"limit": "1.5"}])
def test_pagination_rejects_bad_values(args):
    with pytest.raises(ValidationError):
        parse_pagination(args)
