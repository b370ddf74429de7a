"""Contains the check that the plotting libraries of the reports extra are installed."""
import functools
import importlib.util
import warnings
from typing import Any, Callable, List, Sequence, TypeVar, cast

# Generic type for the return of the function "require_module()"
F = TypeVar("F", bound=Callable[..., Any])

REPORTS_EXTRA = "tabprofiler[reports]"


def missing_modules(names: Sequence[str]) -> List[str]:
    """
    Return the modules which cannot be imported, without importing any.

    :param names: top level module names
    :type names: list[str]
    :return: the names with no installed module
    :rtype: list[str]
    """
    return [name for name in names if importlib.util.find_spec(name) is None]


def warn_missing_module(graph_func: str, module_names: Sequence[str]) -> None:
    """
    Warn that a chart cannot be drawn until the reports extra is installed.

    :param graph_func: Name of the graphing function
    :type graph_func: str
    :param module_names: modules that are missing
    :type module_names: list[str]
    """
    warnings.warn(
        f"{graph_func} draws nothing: {', '.join(module_names)} not installed. "
        f"Install the plotting libraries with `pip install {REPORTS_EXTRA}`.",
        RuntimeWarning,
        stacklevel=3,
    )


def require_module(names: List[str]) -> Callable[[F], F]:
    """
    Skip a graph function with a warning when a plotting module is missing.

    :param names: top level modules the function needs
    :type names: list[str]
    """

    def check_module(f: F) -> F:
        @functools.wraps(f)
        def new_f(*args: Any, **kwds: Any) -> Any:
            missing = missing_modules(names)
            if missing:
                warn_missing_module(f.__name__, missing)
                return None
            return f(*args, **kwds)

        return cast(F, new_f)

    return check_module
