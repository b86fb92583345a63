from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Type

from .rule import Rule


class RuleRegistry:
    """Validation rule classes keyed by rule id (``UKRI-TS-001`` ...).

    Ids are zero-padded, so sorted id order is the published rule table order
    and every listing below comes back in that order.
    """

    def __init__(self):
        self._rules: Dict[str, Type[Rule]] = {}

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def register(self, rule_cls: Type[Rule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError(f"{rule_cls.__name__} does not define rule_id")
        existing = self._rules.get(rule_id)
        if existing is not None and existing is not rule_cls:
            raise ValueError(f"Rule id {rule_id} already registered by {existing.__name__}")
        self._rules[rule_id] = rule_cls

    def get(self, rule_id: str) -> Type[Rule]:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise KeyError(f"No validation rule registered as {rule_id}") from None

    def ids(self) -> List[str]:
        return sorted(self._rules)

    def classes(self) -> List[Type[Rule]]:
        return [self._rules[rule_id] for rule_id in self.ids()]

    def create_all(self, rule_ids: Optional[Iterable[str]] = None) -> List[Rule]:
        wanted = set(rule_ids) if rule_ids is not None else None
        return [cls() for cls in self.classes() if wanted is None or cls.rule_id in wanted]


registry = RuleRegistry()


def register_rule(rule_cls: Type[Rule]) -> Type[Rule]:
    registry.register(rule_cls)
    return rule_cls
