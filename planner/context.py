from dataclasses import dataclass
from typing import Any


@dataclass
class PlannerContext:
    controller: Any
    session: Any
    storage: Any
    suggestions: Any = None
    remote_enabled: bool = False
    auth_configured: bool = False
    auth_hint: str = ""

    @property
    def user(self):
        return self.session.user if self.session is not None else None

    @property
    def is_syncing(self):
        indicator = getattr(self.controller.target, "indicator", None)
        return bool(indicator is not None and indicator.is_syncing)
