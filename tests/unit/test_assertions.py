#
# tests/unit/test_assertions.py
#
"""
Tests for the expectation checker and assertion helpers.
"""

import json

import pytest

from caserunner import AssertionFailure, RunContext, TestCaseError
from caserunner.assertions import equal, expect, is_matching, resolve_exception_class, true


class CustomError(Exception):
    pass


def raiser(error: BaseException):
    def fn():
        raise error

    return fn


class TestIsMatching:
    """Test message patterns."""

    @pytest.mark.parametrize(
        ("pattern", "actual"),
        [
            ("exact message", "exact message"),
            ("  padded  ", "padded"),
            ("value %d% out of range", "value 42 out of range"),
            ("signed %i%", "signed -7"),
            ("float %f%", "float 3.25"),
            ("hex %h%", "hex 1aF0"),
            ("word %w%!", "word some_name!"),
            ("%a% failed", "connection to db failed"),
            ("prefix%A?%", "prefix"),
            ("multi%A%end", "multi\nline\nend"),
            ("tab%s%sep", "tab \t sep"),
            ("100%% sure", "100% sure"),
            ("brackets (%a%) [ok]", "brackets (anything) [ok]"),
        ],
    )
    def test_matches(self, pattern: str, actual: str) -> None:
        assert is_matching(pattern, actual)

    @pytest.mark.parametrize(
        ("pattern", "actual"),
        [
            ("exact message", "exact message plus"),
            ("value %d%", "value x"),
            ("%a% failed", " failed"),
            ("%a%", "two\nlines"),
            ("100%% sure", "100 sure"),
        ],
    )
    def test_does_not_match(self, pattern: str, actual: str) -> None:
        assert not is_matching(pattern, actual)


class TestResolveExceptionClass:
    """Test turning @throws kinds into classes."""

    def test_class_is_returned(self) -> None:
        assert resolve_exception_class(KeyError) is KeyError

    def test_builtin_name(self) -> None:
        assert resolve_exception_class("RuntimeError") is RuntimeError

    def test_namespace_name(self) -> None:
        assert resolve_exception_class("CustomError", globals()) is CustomError

    def test_dotted_name(self) -> None:
        assert resolve_exception_class("json.JSONDecodeError") is json.JSONDecodeError

    @pytest.mark.parametrize("kind", ["NoSuchError", "json.NoSuchError", "print", int])
    def test_unknown(self, kind) -> None:
        with pytest.raises(TestCaseError):
            resolve_exception_class(kind)

    def test_unimportable_module(self) -> None:
        with pytest.raises(TestCaseError, match="Cannot import exception class"):
            resolve_exception_class("no_such_module_xyz.Error")


class TestExpect:
    """Test the expected-exception checker."""

    def test_returns_matching_exception(self) -> None:
        error = ValueError("bad input")
        assert expect(raiser(error), ValueError, "bad %a%") is error

    def test_subclasses_match(self) -> None:
        assert isinstance(expect(raiser(KeyError("k")), LookupError), KeyError)

    def test_nothing_raised(self) -> None:
        with pytest.raises(AssertionFailure) as exc_info:
            expect(lambda: None, "ValueError")
        assert str(exc_info.value) == "ValueError was expected, but none was thrown."
        assert exc_info.value.expected is ValueError

    def test_wrong_class(self) -> None:
        original = TypeError("wrong type")
        with pytest.raises(AssertionFailure) as exc_info:
            expect(raiser(original), ValueError)
        assert str(exc_info.value) == "ValueError was expected but got TypeError (wrong type)"
        assert exc_info.value.__cause__ is original

    def test_wrong_class_without_message(self) -> None:
        with pytest.raises(AssertionFailure, match=r"^ValueError was expected but got TypeError$"):
            expect(raiser(TypeError()), ValueError)

    def test_wrong_message(self) -> None:
        with pytest.raises(AssertionFailure) as exc_info:
            expect(raiser(ValueError("other")), ValueError, "bad %a%")
        assert str(exc_info.value) == "ValueError with a message matching 'bad %a%' was expected but got 'other'"

    def test_counts_into_context(self) -> None:
        context = RunContext()
        expect(raiser(ValueError()), ValueError, context=context)
        with pytest.raises(AssertionFailure):
            expect(lambda: None, ValueError, context=context)
        assert context.assertions == 2

    def test_unknown_name_never_matches(self) -> None:
        with pytest.raises(AssertionFailure) as exc_info:
            expect(raiser(ValueError("bad")), "NoSuchError")
        assert str(exc_info.value) == "NoSuchError was expected but got ValueError (bad)"
        assert exc_info.value.expected == "NoSuchError"

        with pytest.raises(AssertionFailure, match=r"^NoSuchError was expected, but none was thrown\.$"):
            expect(lambda: None, "NoSuchError")

    def test_non_exception_class_is_rejected(self) -> None:
        with pytest.raises(TestCaseError, match="is not an exception class"):
            expect(lambda: None, int)


class TestHelpers:
    """Test equal() and true()."""

    def test_equal(self) -> None:
        context = RunContext()
        equal([1, 2], [1, 2], context=context)
        with pytest.raises(AssertionFailure) as exc_info:
            equal({"a": 1}, {"a": 2}, context=context)
        assert str(exc_info.value) == "{'a': 2} should be {'a': 1}"
        assert exc_info.value.expected == {"a": 1}
        assert context.assertions == 2

    def test_true(self) -> None:
        true(True)
        with pytest.raises(AssertionFailure, match="^1 should be True$"):
            true(1)

    def test_forgot_assertions(self) -> None:
        context = RunContext()
        assert context.forgot_assertions
        context.count_assertion()
        assert not context.forgot_assertions

        context = RunContext()
        context.disable_assertion_check()
        assert not context.forgot_assertions
