from dataclasses import replace
from types import MappingProxyType

import pytest

from app.nlu.names import (
    NAME_RULES,
    capitalize_name,
    clean_name,
    correct_word,
    edit_distance,
    is_valid_name,
    resolve_name,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Mr. Rahul Sharma", "Rahul Sharma"),
        ("Dr Mr Rahul", "Rahul"),
        ("  rahul123, ", "rahul"),
        ("श्री रमेश", "रमेश"),
        ("", ""),
    ],
)
def test_clean_name(raw, expected):
    assert clean_name(raw) == expected


def test_is_valid_name():
    assert is_valid_name("Ra")
    assert not is_valid_name("R")
    assert not is_valid_name("12345")
    assert not is_valid_name("   ")


def test_edit_distance():
    assert edit_distance("varma", "verma") == 1
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3


def test_correct_word_exact_table():
    assert correct_word("varma") == "Verma"
    assert correct_word("raam") == "Ram"
    assert correct_word("akshat", fuzzy=False) == "Akshat"


def test_correct_word_fuzzy_respects_max_distance():
    assert correct_word("rtsh") == "Ritesh"
    strict = replace(NAME_RULES, max_edit_distance=1)
    assert correct_word("rtsh", rules=strict) == "rtsh"


def test_capitalize_name():
    assert capitalize_name("rahul sharma") == "Rahul Sharma"
    assert capitalize_name("IMRAN KHAN") == "Imran Khan"


def test_resolve_devanagari_name():
    assert resolve_name("रितेश वरमा", True) == "Ritesh Verma"
    assert resolve_name("नीरज कुमावत", True) == "Neeraj Kumawat"


def test_resolve_latin_name_is_not_rewritten():
    assert resolve_name("Akshat Jain", False) == "Akshat Jain"
    assert resolve_name("rani verma", False) == "Rani Verma"
    assert resolve_name("Ritessh", False) == "Ritessh"


def test_resolve_latin_name_in_devanagari_utterance_is_fuzzy_corrected():
    assert resolve_name("Ritessh", True) == "Ritesh"


def test_resolve_name_strips_honorifics_and_junk():
    assert resolve_name("Mr. john doe.", False) == "John Doe"
    assert resolve_name("1234", False) == ""
    assert resolve_name(None, False) == ""


def test_fuzzy_boundary_is_distance_two():
    rules = replace(
        NAME_RULES,
        first_names=MappingProxyType({"ritesh": "Ritesh"}),
        surnames=MappingProxyType({}),
    )
    assert correct_word("rtsh", rules=rules) == "Ritesh"
    assert correct_word("rtshx", rules=rules) == "rtshx"
    # too short for fuzzy matching
    assert correct_word("rt", rules=rules) == "rt"


@pytest.mark.parametrize("raw", ["रितेश वरमा", "Mr. rani verma", "Akshat Jain"])
def test_resolve_name_is_idempotent(raw):
    once = resolve_name(raw, True)
    assert resolve_name(once, True) == once
