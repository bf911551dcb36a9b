# core/nav_registry.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List

from core.navigation import View

# Screen renderer signature: (controller) -> None.
ScreenFn = Callable[[object], None]

@dataclass(frozen=True)
class Route:
    view: View                # router state this route renders
    label: str                # UI label
    icon: str                 # emoji or short string
    render: ScreenFn          # callable that renders the screen
    in_sidebar: bool = True

from screens.dashboard import render as dashboard_render
from screens.registration import render as registration_render
from screens.students.page import render as students_render
from screens.students.profile import render as profile_render

ROUTES: List[Route] = [
    Route(View.DASHBOARD, "Dashboard",        "📊", dashboard_render),
    Route(View.REGISTER,  "Register Student", "📝", registration_render),
    Route(View.STUDENTS,  "All Students",     "🎓", students_render),
    Route(View.PROFILE,   "Student Profile",  "👤", profile_render, in_sidebar=False),
]

# Index for quick lookup (used by app.py)
ROUTE_INDEX: Dict[View, Route] = {r.view: r for r in ROUTES}
SIDEBAR_ROUTES: List[Route] = [r for r in ROUTES if r.in_sidebar]
