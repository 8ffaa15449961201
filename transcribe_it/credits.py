"""Credit-charging hook for billable translation operations.

The credits ledger lives outside this package; the service only asks the
hook whether enough credits remain and reports what was used.
"""

import math
from typing import Any, Literal, Optional, Protocol

CreditOperation = Literal["translation", "extract_and_translate"]

CHARACTERS_PER_CREDIT = 1000


def compute_required_credits(text_length: int) -> int:
    """One credit per started 1000 characters, minimum 1."""
    return max(1, math.ceil((text_length or 0) / CHARACTERS_PER_CREDIT))


class CreditHook(Protocol):
    def ensure_sufficient(self, credits: int) -> None:
        """Raise if fewer than ``credits`` remain."""
        ...

    def charge(
        self,
        operation: CreditOperation,
        credits: int,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None: ...
