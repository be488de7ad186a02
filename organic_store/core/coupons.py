# organic_store/core/coupons.py
from collections.abc import Iterator, Mapping
from functools import lru_cache

from organic_store.core.config import CouponRule, get_settings


class CouponTable(Mapping[str, CouponRule]):
    """
    Read-only, case-insensitive lookup of coupon code -> rule.

    The table is plain configuration: no expiry, usage limits or
    per-user restrictions.
    """

    def __init__(self, rules: Mapping[str, CouponRule]):
        self._rules = {code.strip().upper(): rule for code, rule in rules.items()}

    @staticmethod
    def normalize(code: str) -> str:
        return code.strip().upper()

    def lookup(self, code: str | None) -> CouponRule | None:
        if not code:
            return None
        return self._rules.get(self.normalize(code))

    def codes(self) -> list[str]:
        """Normalized codes in configuration order."""
        return list(self._rules)

    def __getitem__(self, code: str) -> CouponRule:
        return self._rules[self.normalize(code)]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.normalize(code) in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


@lru_cache
def get_coupon_table() -> CouponTable:
    """Coupon table built from `Settings.COUPONS`."""
    return CouponTable(get_settings().COUPONS)
