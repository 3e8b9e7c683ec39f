"""Tests for query normalization and text helpers."""

from __future__ import annotations

import json

from carefinder.services.search_text import (
    clean_whitespace,
    fold,
    normalize_query,
    split_terms,
    to_search_text,
)


def test_fold_lowercases_and_handles_none():
    assert fold("Zoloft SSRI") == "zoloft ssri"
    assert fold(None) == ""


def test_clean_whitespace_collapses_runs():
    assert clean_whitespace("  Major\n\tDepressive   Disorder ") == "Major Depressive Disorder"
    assert clean_whitespace(None) == ""


def test_normalize_query_trims_and_lowercases():
    assert normalize_query("  Anxiety Therapy ") == "anxiety therapy"


def test_normalize_query_rejects_short_and_missing():
    assert normalize_query("a") is None
    assert normalize_query("   a   ") is None
    assert normalize_query("") is None
    assert normalize_query(None) is None


def test_normalize_query_accepts_two_characters():
    assert normalize_query("ok") == "ok"


def test_split_terms_keeps_duplicates():
    assert split_terms("cbt  for\tcbt") == ["cbt", "for", "cbt"]


def test_split_terms_lowercases():
    assert split_terms("Deep TMS") == ["deep", "tms"]


def test_to_search_text_is_compact_json():
    text = to_search_text({"dosage": {"min": 50}, "forms": ["tablet"]})
    assert text == '{"dosage":{"min":50},"forms":["tablet"]}'
    assert json.loads(text)["forms"] == ["tablet"]


def test_to_search_text_keeps_unicode_and_stringifies_unknowns():
    from datetime import date

    text = to_search_text({"name": "café", "approved": date(1991, 12, 30)})
    assert "café" in text
    assert "1991-12-30" in text


def test_to_search_text_none_is_empty():
    assert to_search_text(None) == ""
