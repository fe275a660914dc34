from __future__ import annotations

from dataclasses import dataclass

from .schedule_models import GanttData


@dataclass(frozen=True)
class ExpansionState:
    """
    Immutable set of expanded phase ids.

    The calling screen owns the value and swaps it on every toggle. A fresh
    snapshot load starts from `all_expanded`; a re-derived snapshot of the
    same screen goes through `reconcile` so user choices survive.
    """

    expanded: frozenset[str] = frozenset()
    known: frozenset[str] = frozenset()

    @classmethod
    def all_expanded(cls, data: GanttData) -> "ExpansionState":
        ids = frozenset(data.phase_ids())
        return cls(expanded=ids, known=ids)

    def is_expanded(self, phase_id: str) -> bool:
        return phase_id in self.expanded

    def toggle(self, phase_id: str) -> "ExpansionState":
        if phase_id in self.expanded:
            return ExpansionState(self.expanded - {phase_id}, self.known | {phase_id})
        return ExpansionState(self.expanded | {phase_id}, self.known | {phase_id})

    def reconcile(self, data: GanttData) -> "ExpansionState":
        """Carry state onto a new snapshot: new phases open, vanished ones dropped."""
        current = frozenset(data.phase_ids())
        fresh = current - self.known
        kept = self.expanded & current
        return ExpansionState(expanded=kept | fresh, known=current)
