"""Function metadata helpers.

``create_function`` is what the informer uses to build the named wrappers
installed by ``once`` and ``after``; the others are small introspection
utilities that go with it.
"""

from __future__ import annotations

import ast
import inspect
import keyword
import logging
from typing import Any
from typing import Callable

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def is_name_allowed(name: str) -> bool:
    """Return True if ``name`` can be used as a Python function name."""
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def _names_from_source(source: str) -> list[str]:
    tree = ast.parse(source.strip())
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
            args = node.args
            names = [arg.arg for arg in (*args.posonlyargs, *args.args)]
            if args.vararg:
                names.append(args.vararg.arg)
            names.extend(arg.arg for arg in args.kwonlyargs)
            if args.kwarg:
                names.append(args.kwarg.arg)
            return names
    return []


def get_argument_names(fn: Callable[..., Any] | str) -> list[str]:
    """Return the parameter names of a callable or of the first function in ``fn`` source."""
    if isinstance(fn, str):
        return _names_from_source(fn)
    try:
        return list(inspect.signature(fn).parameters)
    except (TypeError, ValueError):
        logger.debug("No signature available for %r", fn)
        return []


def get_arity(fn: Callable[..., Any]) -> int:
    """Return the number of positional parameters ``fn`` declares."""
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return 0
    return sum(1 for parameter in parameters if parameter.kind in _POSITIONAL)


def _signature_for(arg_names: list[str] | str) -> inspect.Signature:
    if isinstance(arg_names, str):
        arg_names = [name.strip() for name in arg_names.split(",") if name.strip()]
    for name in arg_names:
        if not is_name_allowed(name):
            raise ValueError(f"Invalid argument name: {name!r}")
    return inspect.Signature(
        [inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD) for name in arg_names]
    )


def create_function(
    name: str,
    fn: Callable[..., Any],
    arg_names: list[str] | str | None = None,
) -> Callable[..., Any]:
    """Create a new function called ``name`` that forwards to ``fn``.

    The wrapper reports ``arg_names`` as its signature when given (a list or
    a comma separated string), otherwise the signature of ``fn``. ``fn`` gets
    a ``wrapper`` attribute pointing back at the new function when it accepts
    attributes.

    Raises:
        ValueError: If ``name`` or one of ``arg_names`` is not a valid identifier.
    """
    if not is_name_allowed(name):
        raise ValueError(f"Invalid function name: {name!r}")

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    wrapper.__name__ = name
    wrapper.__qualname__ = name
    wrapper.__doc__ = getattr(fn, "__doc__", None)

    if arg_names is not None:
        wrapper.__signature__ = _signature_for(arg_names)  # type: ignore[attr-defined]
    else:
        try:
            wrapper.__signature__ = inspect.signature(fn)  # type: ignore[attr-defined]
        except (TypeError, ValueError):
            logger.debug("Could not copy signature of %r", fn)

    try:
        fn.wrapper = wrapper  # type: ignore[attr-defined]
    except (AttributeError, TypeError):
        pass

    return wrapper
