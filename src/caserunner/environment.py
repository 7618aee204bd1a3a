# src/caserunner/environment.py
#
"""
Per-run context shared between the dispatcher and the assertion helpers.
"""

from attrs import field, mutable


@mutable(slots=True)
class RunContext:
    """
    Holds the assertion bookkeeping for a single ``TestCase.run`` invocation.

    Introspection mode switches ``check_assertions`` off; nothing in the
    runner switches it back on.
    """

    check_assertions: bool = field(default=True)
    assertions: int = field(default=0)

    def count_assertion(self) -> None:
        self.assertions += 1

    def disable_assertion_check(self) -> None:
        self.check_assertions = False

    @property
    def forgot_assertions(self) -> bool:
        """True when checks are active and no assertion was counted."""
        return self.check_assertions and self.assertions == 0


# 🔼⚙️
