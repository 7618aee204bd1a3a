#
# src/caserunner/case.py
#
"""
The test case: method discovery, data set expansion and per-run execution.
"""

import inspect
import re
import sys
from collections.abc import Callable, Mapping, Sequence
from functools import partial
from typing import Any

import click
import structlog

from caserunner import assertions, data_files
from caserunner.annotations import MethodInfo, get_method_info, is_empty_throws, split_throws
from caserunner.dumper import render_args
from caserunner.environment import RunContext
from caserunner.exceptions import AssertionFailure, DataProviderError, TestCaseError
from caserunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("case")

DataSet = Mapping[str, Any] | Sequence[Any]

_MISSING = object()

# (kind, message pattern, namespace used to resolve a kind given by name)
Expectation = tuple[type[BaseException] | str, str | None, Mapping[str, Any] | None]
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


class TestCase:
    """
    Base class for a single test case.

    Methods whose names start with ``test`` followed by an uppercase letter,
    a digit or an underscore (``testAdd``, ``test_add``, ``test2``) are test
    methods. Each one runs once per data set, wrapped in :meth:`set_up` and
    :meth:`tear_down`, and every lifecycle step is reported to the attached
    listeners.
    """

    __test__ = False

    LIST_METHODS = "caserunner-list-methods"
    METHOD_PATTERN = re.compile(r"^(?i:test)[A-Z0-9_]")
    ARGV_PATTERN = re.compile(r"(?:--method=)?([\w-]+)", re.IGNORECASE)

    def __init__(self) -> None:
        self._listeners: list[Any] = []
        self.context = RunContext()

    # --- Listeners ---

    def add_listener(self, listener: Any) -> None:
        """Attach a listener; listeners are notified in the order they were added."""
        self._listeners.append(listener)

    def on_event(self, name: str, *args: Any) -> None:
        """Call ``name`` on every listener implementing it, passing this case first."""
        for listener in self._listeners:
            handler = getattr(listener, name, None)
            if callable(handler):
                handler(self, *args)

    # --- Dispatcher ---

    def discover_methods(self) -> dict[str, Callable[..., Any]]:
        """Map test method names to bound methods, most-derived class first."""
        methods: dict[str, Callable[..., Any]] = {}
        for klass in type(self).__mro__:
            for name in vars(klass):
                if name in methods or not self.METHOD_PATTERN.match(name):
                    continue
                member = getattr(self, name, None)
                if callable(member):
                    methods[name] = member
        return methods

    def _method_from_argv(self, argv: Sequence[str]) -> str | None:
        if len(argv) < 2:
            return None
        match = self.ARGV_PATTERN.fullmatch(argv[-1])
        if not match or match.group(1).startswith("-"):
            return None
        return match.group(1)

    def run(self, method: str | None = None, argv: Sequence[str] | None = None) -> None:
        """
        Run the test case.

        Args:
            method: Name of the single test method to run. When omitted, the
                last invocation argument (``--method=<name>`` or ``<name>``)
                selects it; otherwise every test method runs.
            argv: Invocation arguments, ``sys.argv`` by default.
        """
        self.context = RunContext()
        methods = self.discover_methods()
        if method is not None and method.startswith("--"):
            method = None

        if method is None:
            method = self._method_from_argv(sys.argv if argv is None else argv)
            if method == self.LIST_METHODS:
                self.context.disable_assertion_check()
                click.echo("[" + ",".join(methods) + "]", nl=False)
                return

        case_log = log.bind(case=type(self).__name__)
        case_log.debug("Discovered test methods", methods=list(methods), emoji_key="run")

        if method is None:
            for name in methods:
                self.run_test(name)
        elif method in methods:
            self.run_test(method)
        else:
            case_log.error("Unknown test method requested", method=method)
            raise TestCaseError(f"Method '{method}' does not exist or it is not a testing method.")

    # --- Executor ---

    def _get_public_method(self, name: str) -> Callable[..., Any]:
        member = getattr(self, name, _MISSING)
        if member is _MISSING:
            raise TestCaseError(f"Method {name} does not exist.")
        if name.startswith("_") or not callable(member):
            raise TestCaseError(f"Method {name} is not public. Make it public or rename it.")
        return member

    def _expected_exception(
        self, name: str, info: MethodInfo, method: Callable[..., Any]
    ) -> Expectation | None:
        if not info.expects_exception:
            return None
        if len(info.throws) > 1:
            raise TestCaseError(f"Annotation @throws for {name}() can be specified only once.")
        declaration = info.throws[0]
        if is_empty_throws(declaration):
            raise TestCaseError(f"Missing class name in @throws annotation for {name}().")
        kind, pattern = split_throws(declaration)
        if isinstance(kind, type):
            assertions.resolve_exception_class(kind)
        # Names are resolved when the body runs; an unknown name is a mismatch there.
        namespace = getattr(getattr(method, "__func__", method), "__globals__", None)
        return kind, pattern, namespace

    def _expand_data(self, name: str, info: MethodInfo, method: Callable[..., Any]) -> list[DataSet]:
        parameters = [
            param for param in inspect.signature(method).parameters.values()
            if param.kind not in _VARIADIC
        ]
        defaults = {
            param.name: None if param.default is param.empty else param.default
            for param in parameters
        }

        data: list[DataSet] = []
        for provider in info.data_provider:
            result = self.get_data(provider)
            if not _is_sequence(result):
                raise TestCaseError(f"Data provider {provider}() doesn't return array.")
            for entry in result:
                if isinstance(entry, Mapping):
                    # Only the first key decides whether the entry is named.
                    if isinstance(next(iter(entry), None), str):
                        data.append({**defaults, **entry})
                    else:
                        data.append(tuple(entry.values()))
                elif _is_sequence(entry):
                    data.append(tuple(entry))
                else:
                    raise TestCaseError(f"Data provider {provider}() doesn't return array.")

        if not info.data_provider:
            if any(param.default is param.empty for param in parameters):
                raise TestCaseError(f"Method {name}() has arguments, but @dataProvider is missing.")
            data.append(())
        return data

    def run_test(self, method_name: str, args: DataSet | None = None) -> None:
        """
        Run one test method once per data set.

        Args:
            method_name: The test method to run.
            args: A single data set to use instead of the declared providers.

        Raises:
            TestCaseError: The method is misdeclared; raised before any hook runs.
            Exception: The first failing data set's error, after listeners
                were notified.
        """
        method = self._get_public_method(method_name)
        info = get_method_info(method)
        expected = self._expected_exception(method_name, info, method)
        data = [args] if args is not None else self._expand_data(method_name, info, method)

        log.debug(
            "Running test method",
            case=type(self).__name__,
            method=method_name,
            data_sets=len(data),
            expects=getattr(expected[0], "__qualname__", expected[0]) if expected else None,
        )
        self.on_event("on_before_run_test", method_name)

        for params in data:
            self._run_data_set(method_name, method, params, expected)

    def _run_data_set(
        self,
        name: str,
        method: Callable[..., Any],
        params: DataSet,
        expected: Expectation | None,
    ) -> None:
        try:
            self.on_event("on_before_set_up", name, params)
            self.set_up()
            self.on_event("on_after_set_up", name, params)

            test_error = tear_down_error = None
            try:
                call = partial(self._invoke, method, params)
                if expected:
                    kind, pattern, namespace = expected
                    assertions.expect(call, kind, pattern, context=self.context, namespace=namespace)
                else:
                    call()
            except Exception as e:
                test_error = e
            finally:
                # Also reached when the body raises a BaseException, which then keeps propagating.
                try:
                    self.on_event("on_before_tear_down", name, params)
                    try:
                        self.tear_down()
                    finally:
                        self.on_event("on_after_tear_down", name, params)
                except Exception as e:
                    tear_down_error = e

            if test_error is not None:
                raise test_error
            if tear_down_error is not None:
                raise tear_down_error

        except AssertionFailure as e:
            if e.orig_message:
                e.set_message(f"{e.orig_message} in {name}{render_args(params)}")
            self._fail(name, params, e)
            raise
        except Exception as e:
            if str(e):
                e.add_note(f"in {name}{render_args(params)}")
            self._fail(name, params, e)
            raise
        except BaseException as e:
            self._fail(name, params, e)
            raise

        self.on_event("on_test_pass", name, params)
        self.on_event("on_after_run_test", name)

    def _fail(self, name: str, params: DataSet, error: BaseException) -> None:
        log.debug("Test data set failed", case=type(self).__name__, method=name, error=str(error))
        self.on_event("on_test_fail", name, params, error)
        self.on_event("on_after_run_test", name)

    @staticmethod
    def _invoke(method: Callable[..., Any], params: DataSet) -> Any:
        if isinstance(params, Mapping):
            return method(**params)
        return method(*params)

    # --- Data providers ---

    def get_data(self, provider: str) -> Any:
        """
        Resolve a data provider.

        A name containing a dot refers to a data file next to the module that
        defines this case (``"sums.ini, > 1"``); any other name is a method of
        this case returning a list of data sets.
        """
        provider = provider.strip()
        if "." in provider[1:]:
            path, query, optional = data_files.parse_annotation(provider, inspect.getfile(type(self)))
            return data_files.load(path, query, optional=optional)

        method = getattr(self, provider, None) if provider else None
        if not callable(method):
            raise DataProviderError(f"Data provider {provider}() does not exist.")
        return method()

    # --- Hooks ---

    def set_up(self) -> None:
        """Called before each data set of a test method."""

    def tear_down(self) -> None:
        """Called after each data set of a test method, even when it failed."""

    # --- Assertions ---

    def assert_equal(self, expected: Any, actual: Any) -> None:
        assertions.equal(expected, actual, context=self.context)

    def assert_true(self, value: Any) -> None:
        assertions.true(value, context=self.context)

    def assert_raises(
        self, fn: Callable[[], Any], kind: type[BaseException] | str, pattern: str | None = None
    ) -> BaseException:
        return assertions.expect(fn, kind, pattern, context=self.context)


# 🔼⚙️
