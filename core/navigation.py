# core/navigation.py
"""View router for the console: dashboard, register, students, profile."""

from __future__ import annotations
from enum import Enum
from typing import Callable, MutableMapping, Optional

VIEW_KEY = "route"
SELECTED_KEY = "selected_student_id"


class View(str, Enum):
    DASHBOARD = "dashboard"
    REGISTER = "register"
    STUDENTS = "students"
    PROFILE = "profile"


INITIAL_VIEW = View.DASHBOARD


class Router:
    """
    Keeps the current view and the selected record id in a mutable mapping
    (st.session_state in the app, a dict in tests).

    `exists` lets the router drop a profile whose record is unknown.
    """

    def __init__(self, state: MutableMapping, exists: Optional[Callable[[str], bool]] = None):
        self.state = state
        self._exists = exists or (lambda _id: True)
        self.state.setdefault(VIEW_KEY, INITIAL_VIEW.value)
        self.state.setdefault(SELECTED_KEY, None)

    @property
    def selected_id(self) -> Optional[str]:
        return self.state.get(SELECTED_KEY)

    def navigate(self, view: View | str, record_id: Optional[str] = None) -> View:
        view = View(view)
        if view is View.PROFILE:
            self.state[SELECTED_KEY] = record_id
        else:
            self.state[SELECTED_KEY] = None
        self.state[VIEW_KEY] = view.value
        return self.current()

    def close_profile(self) -> View:
        return self.navigate(View.STUDENTS)

    def reset(self) -> None:
        self.state[VIEW_KEY] = INITIAL_VIEW.value
        self.state[SELECTED_KEY] = None

    def current(self) -> View:
        """Resolved view; a profile without a usable record renders as dashboard."""
        try:
            view = View(self.state.get(VIEW_KEY) or INITIAL_VIEW.value)
        except ValueError:
            view = INITIAL_VIEW
        if view is View.PROFILE:
            rid = self.selected_id
            if not rid or not self._exists(rid):
                return View.DASHBOARD
        return view
