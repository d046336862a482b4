import inspect

import pytest

from evented.utils.functions import create_function
from evented.utils.functions import get_argument_names
from evented.utils.functions import get_arity
from evented.utils.functions import is_name_allowed


class TestCreateFunction:
    def test_returns_new_named_function(self):
        fnc = create_function("ReturnOne", lambda: 1)

        assert fnc.__name__ == "ReturnOne"
        assert fnc.__qualname__ == "ReturnOne"
        assert fnc() == 1

    def test_wrapped_function_references_wrapper(self):
        def med():
            return med.wrapper.__name__

        fnc = create_function("ReturnWrapperName", med)
        assert fnc() == "ReturnWrapperName"

    def test_keeps_arity(self):
        def test(a, b):
            return a + b

        fnc = create_function("Adder", test)
        assert get_arity(fnc) == 2
        assert fnc(1, 2) == 3

    def test_accepts_list_of_argument_names(self):
        fnc = create_function("Three", lambda *args: args, ["a", "b", "c"])
        assert get_arity(fnc) == 3
        assert list(inspect.signature(fnc).parameters) == ["a", "b", "c"]

    def test_accepts_comma_separated_argument_names(self):
        fnc = create_function("Four", lambda *args: args, "a, b, c, d")
        assert get_arity(fnc) == 4

    def test_rejects_invalid_names(self):
        with pytest.raises(ValueError, match="Invalid function name"):
            create_function("class", lambda: None)
        with pytest.raises(ValueError, match="Invalid argument name"):
            create_function("ok", lambda: None, ["1a"])


class TestGetArgumentNames:
    def test_callable(self):
        def test(alpha, beta):
            return None

        assert get_argument_names(test) == ["alpha", "beta"]

    def test_no_arguments(self):
        assert get_argument_names(lambda: None) == []

    def test_source_string(self):
        assert get_argument_names("def test(alpha, beta):\n    pass\n") == ["alpha", "beta"]

    def test_lambda_source_with_varargs(self):
        assert get_argument_names("lambda a, *rest, key=None, **extra: a") == [
            "a",
            "rest",
            "key",
            "extra",
        ]

    def test_builtin_without_signature(self):
        # Some builtins expose no signature at all
        names = get_argument_names(print)
        assert isinstance(names, list)


class TestIsNameAllowed:
    def test_allowed_names(self):
        assert is_name_allowed("zever")
        assert is_name_allowed("jelle")

    def test_reserved_names(self):
        for name in ("del", "continue", "class", "lambda"):
            assert not is_name_allowed(name)

    def test_names_starting_with_numbers(self):
        assert not is_name_allowed("3delete")
        assert not is_name_allowed("3new")

    def test_non_strings(self):
        assert not is_name_allowed(None)
