"""In-memory cart store for development and testing.

Carts are kept per subject id. Reads and clears can be configured to fail so
that every checkout failure path can be exercised without a real service.
"""

import threading

from checkout.cart.port import CartGateway, CartLine, CartStoreUnavailable
from checkout.identity.port import Principal


class FakeCartStore(CartGateway):
    """Configurable fake cart store."""

    def __init__(self) -> None:
        self._carts: dict[str, list[CartLine]] = {}
        self._lock = threading.Lock()
        self.fail_reads: bool = False
        self.fail_clears: bool = False
        self.failure_reason: str = "Cart service timed out"
        self.calls: list[dict] = []

    def configure(
        self,
        fail_reads: bool = False,
        fail_clears: bool = False,
        failure_reason: str = "Cart service timed out",
    ) -> None:
        """Configure failure behavior at runtime."""
        self.fail_reads = fail_reads
        self.fail_clears = fail_clears
        self.failure_reason = failure_reason

    def put(self, subject_id: str, lines: list[tuple[str, int]] | list[CartLine]) -> None:
        """Replace a subject's cart."""
        cart = [line if isinstance(line, CartLine) else CartLine(*line) for line in lines]
        with self._lock:
            self._carts[str(subject_id)] = cart

    def lines_for(self, subject_id: str) -> list[CartLine]:
        with self._lock:
            return list(self._carts.get(str(subject_id), []))

    def get_cart(self, principal: Principal) -> list[CartLine]:
        self.calls.append(
            {"method": "get_cart", "subject_id": principal.subject_id, "authorization": principal.authorization}
        )
        if self.fail_reads:
            raise CartStoreUnavailable(self.failure_reason)
        return self.lines_for(principal.subject_id)

    def clear_cart(self, principal: Principal) -> None:
        self.calls.append(
            {"method": "clear_cart", "subject_id": principal.subject_id, "authorization": principal.authorization}
        )
        if self.fail_clears:
            raise CartStoreUnavailable(self.failure_reason)
        with self._lock:
            self._carts.pop(principal.subject_id, None)
