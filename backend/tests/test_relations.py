"""Tests for relation shape normalisation."""
from __future__ import annotations

from app.services.dashboard.relations import full_name, related_field, to_many, to_one


def test_to_one_returns_object_unchanged() -> None:
    company = {"name": "Acme"}
    assert to_one(company) is company
    assert to_one(to_one(company)) is company


def test_to_one_unwraps_single_element_list() -> None:
    company = {"name": "Acme"}
    assert to_one([company]) is company


def test_to_one_treats_empty_and_missing_as_absent() -> None:
    assert to_one([]) is None
    assert to_one(None) is None
    assert to_one("Acme") is None


def test_to_many_wraps_lone_object_and_defaults_to_empty() -> None:
    assert to_many(None) == []
    assert to_many({"id": "t1"}) == [{"id": "t1"}]
    assert to_many([{"id": "t1"}, {"id": "t2"}]) == [{"id": "t1"}, {"id": "t2"}]


def test_related_field_degrades_to_empty_string() -> None:
    assert related_field({"companies": [{"name": "Acme"}]}, "companies") == "Acme"
    assert related_field({"companies": {"name": "Acme"}}, "companies") == "Acme"
    assert related_field({"companies": []}, "companies") == ""
    assert related_field({"companies": {"name": None}}, "companies") == ""
    assert related_field({}, "companies") == ""
    assert related_field(None, "companies") == ""


def test_full_name_skips_missing_parts() -> None:
    assert full_name({"first_name": "Ada", "last_name": "Lovelace"}) == "Ada Lovelace"
    assert full_name({"first_name": "Ada", "last_name": None}) == "Ada"
    assert full_name(None) == ""
