from __future__ import annotations

import io
import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import column_index_from_string, get_column_letter

from ..attendance.repository import AttendanceRepository
from ..attendance.rules import calculate_attendance
from ..attendance.service import calculation_input
from ..common.datetime_utils import DateRange, iter_days, resolve_range
from ..core.enums import AttendanceStatus, RangeType
from ..core.exceptions import NotFoundError, ValidationError
from ..holidays.repository import HolidayRepository
from ..practice.service import PracticeService
from ..students.repository import StudentRepository
from .classifier import CellKind, classify_cell

logger = logging.getLogger(__name__)

SHEET_TITLE = "Посещаемость"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_NAME_WIDTH = 30
_GROUP_WIDTH = 12
_DAY_WIDTH = 6
_PERCENT_WIDTH = 8

MAX_COLUMNS = column_index_from_string("XFD")


class ExportService:
    """Builds the attendance grid workbook for one or more groups."""

    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        practice_service: PracticeService,
        *,
        clock: Callable[[], datetime],
    ):
        self._students = students
        self._attendance = attendance
        self._holidays = holidays
        self._practice = practice_service
        self._clock = clock

    def resolve(self, kind: RangeType, start: Optional[str] = None, end: Optional[str] = None) -> DateRange:
        return resolve_range(kind, today=self._clock().date(), start=start, end=end)

    def filename(self) -> str:
        return f"attendance_{self._clock().date().isoformat()}.xlsx"

    def build_workbook(
        self,
        group_ids: Iterable[int],
        kind: RangeType,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Workbook:
        group_ids = [int(g) for g in group_ids]
        period = self.resolve(kind, start, end)
        # name, group, one column per day, percent
        if (period.end - period.start).days + 4 > MAX_COLUMNS:
            raise ValidationError("Слишком длинный период для выгрузки")

        students = self._students.list_by_group_ids(group_ids) if group_ids else self._students.list()
        if not students:
            raise NotFoundError("Студенты не найдены")

        holidays = {h.date for h in self._holidays.list(start=period.start, end=period.end)}
        records = self._attendance.list_for_students(
            [s.student_id for s in students], start=period.start, end=period.end
        )
        practice = self._practice.names_for({s.group_id for s in students}, period.start, period.end)
        days: list[date] = list(iter_days(period.start, period.end))

        records_by_student: dict[int, list] = {}
        latest = {}
        for r in records:
            records_by_student.setdefault(r.student_id, []).append(r)
            latest[(r.student_id, r.date)] = r

        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE

        headers = ["ФИО", "Группа", *[d.strftime("%d.%m") for d in days], "%"]
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = Font(bold=True)
            cell.alignment = Alignment(horizontal="center", vertical="center")

        percent_col = len(headers)
        for row_idx, student in enumerate(students, start=2):
            ws.cell(row=row_idx, column=1, value=student.full_name)
            ws.cell(row=row_idx, column=2, value=student.group_name)

            for offset, day in enumerate(days):
                record = latest.get((student.student_id, day))
                label = classify_cell(
                    day,
                    holidays=holidays,
                    practice_name=practice.get((student.group_id, day)),
                    status=record.status if record else None,
                )
                cell = ws.cell(row=row_idx, column=3 + offset, value=label.label)
                cell.alignment = Alignment(horizontal="center")
                if label.color:
                    cell.fill = PatternFill("solid", fgColor=label.color)
                if (
                    record is not None
                    and record.status == AttendanceStatus.LATE
                    and record.late_minutes is not None
                    and label.kind == CellKind.STATUS
                ):
                    cell.comment = Comment(f"Опоздание: {record.late_minutes} мин", "college-attendance")

            stats = calculate_attendance(
                calculation_input(records_by_student.get(student.student_id, [])),
                holidays,
                period.start,
                period.end,
            )
            percent_cell = ws.cell(row=row_idx, column=percent_col, value=f"{stats.percent}%")
            percent_cell.font = Font(bold=True)

        ws.column_dimensions["A"].width = _NAME_WIDTH
        ws.column_dimensions["B"].width = _GROUP_WIDTH
        for col_idx in range(3, percent_col):
            ws.column_dimensions[get_column_letter(col_idx)].width = _DAY_WIDTH
        ws.column_dimensions[get_column_letter(percent_col)].width = _PERCENT_WIDTH
        ws.freeze_panes = "C2"

        logger.info(
            "attendance export: %s students, %s..%s (%s)", len(students), period.start, period.end, kind.value
        )
        return wb

    def build_bytes(
        self,
        group_ids: Iterable[int],
        kind: RangeType,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> bytes:
        buffer = io.BytesIO()
        self.build_workbook(group_ids, kind, start, end).save(buffer)
        return buffer.getvalue()
