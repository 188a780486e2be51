"""Grade-entry windows per component and trimester.

A component may be edited only while an ACTIVE window for the same component,
trimester and academic year covers the given day (both ends inclusive).
"""

from __future__ import annotations

import datetime
from typing import Iterable, Optional

from gradegate.core.domain.enums import EntryWindowStatus, GradeComponent
from gradegate.core.domain.models import EntryWindow


def window_is_open(window: EntryWindow, today: datetime.date) -> bool:
    return (
        window.status == EntryWindowStatus.ACTIVE
        and window.start_date <= today <= window.end_date
    )


def find_open_window(
    component: GradeComponent,
    trimester: int,
    academic_year: str,
    windows: Iterable[EntryWindow],
    today: datetime.date,
) -> Optional[EntryWindow]:
    for window in windows:
        if window.component != component:
            continue
        if window.trimester != trimester or window.academic_year != academic_year:
            continue
        if window_is_open(window, today):
            return window
    return None


def can_edit_component(
    component: GradeComponent,
    trimester: int,
    academic_year: str,
    windows: Iterable[EntryWindow],
    today: datetime.date,
) -> bool:
    return find_open_window(component, trimester, academic_year, windows, today) is not None
