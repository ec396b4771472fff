"""Execution environment policy.

Filters that come from untrusted input run under the SECURE
environment. Functions whose cost grows with an attacker-chosen
argument (padding, repetition, formatting, replacement) are tagged
SECURE. They clamp their output through ``EnvironmentPolicy.limit_size``
or refuse to grow past the budget through
``EnvironmentPolicy.check_growth``. When the policy excludes restricted
functions they cannot be resolved at all.

The active policy is process-wide. Set it before any traversal starts;
changing it mid-traversal is not supported.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from squiggly import filter_logger

if TYPE_CHECKING:
    from squiggly.functions.registry import FunctionSpec


class Environment(str, Enum):
    NORMAL = "normal"
    SECURE = "secure"


DEFAULT_MEMORY_BUDGET = 200


class EnvironmentPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    environment: Environment = Environment.NORMAL
    memory_budget: int = Field(DEFAULT_MEMORY_BUDGET, gt=0)
    exclude_restricted: bool = False

    @property
    def secure(self) -> bool:
        return self.environment == Environment.SECURE

    def allows(self, spec: FunctionSpec) -> bool:
        """False for SECURE-tagged functions when restricted ones are excluded."""
        return not (
            self.secure
            and self.exclude_restricted
            and spec.environment == Environment.SECURE
        )

    def limit_size(self, requested: int, unit_length: int) -> int:
        """Clamp a requested output size under the SECURE environment.

        The maximum is the memory budget divided by twice the length of
        the repeated unit (pad string, repeated value). A zero-length
        unit cannot grow the output, so the request stands.
        """
        if not self.secure or unit_length <= 0:
            return requested
        maximum = self.memory_budget // (unit_length * 2)
        if requested > maximum:
            filter_logger.log_size_clamped(requested, maximum)
            return maximum
        return requested

    def check_growth(self, original_length: int, result_length: int) -> None:
        """Refuse a result that outgrew both its input and the memory budget.

        Only applies under the SECURE environment. Output no longer than
        the input is always allowed, so shrinking a large value still works.

        Raises:
            ValueError: If *result_length* exceeds the larger of
                *original_length* and the memory budget.
        """
        if not self.secure:
            return
        allowed = max(original_length, self.memory_budget)
        if result_length > allowed:
            raise ValueError(
                f"result of {result_length} characters exceeds the allowed {allowed}"
            )


_active_policy = EnvironmentPolicy()


def get_active_policy() -> EnvironmentPolicy:
    return _active_policy


def set_active_policy(policy: EnvironmentPolicy) -> None:
    """Install *policy* process-wide."""
    global _active_policy
    _active_policy = policy
    filter_logger.log_policy_activated(policy.environment.value, policy.memory_budget)
