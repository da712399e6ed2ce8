from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import academic_year_start
from ..groups.repository import GroupRepository
from ..specialties.repository import SpecialtyRepository

logger = logging.getLogger(__name__)


def archive_table_name(today: date) -> str:
    year = academic_year_start(today)
    return f"attendance_archive_{year}_{year + 1}"


@dataclass(frozen=True)
class FinishYearResult:
    archive_table: str
    archived_records: int
    deleted_groups: list[str] = field(default_factory=list)
    promoted_groups: int = 0

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": f"Год завершён. Архивировано в {self.archive_table}",
            "archiveTable": self.archive_table,
            "archivedRecords": self.archived_records,
            "deletedGroups": list(self.deleted_groups),
            "promotedGroups": self.promoted_groups,
        }


class AcademicYearService:
    """Academic year rollover: archive the journal, graduate and promote groups."""

    def __init__(self, attendance: AttendanceRepository, groups: GroupRepository, specialties: SpecialtyRepository):
        self._attendance = attendance
        self._groups = groups
        self._specialties = specialties

    def finish_year(self, today: date) -> FinishYearResult:
        table = archive_table_name(today)
        archived = self._attendance.archive_all(table)

        durations: dict[int, int] = {}
        deleted: list[str] = []
        promoted = 0
        for group in self._groups.list_all():
            if group.specialty_id not in durations:
                specialty = self._specialties.get_by_id(group.specialty_id)
                durations[group.specialty_id] = specialty.duration_years if specialty else 0

            duration = durations[group.specialty_id]
            if duration and group.course >= duration:
                self._groups.delete(group.group_id)
                deleted.append(group.name)
            else:
                self._groups.update(group.group_id, {"course": group.course + 1})
                promoted += 1

        logger.info(
            "academic year finished: archived=%s into %s, graduated=%s, promoted=%s",
            archived,
            table,
            len(deleted),
            promoted,
        )
        return FinishYearResult(
            archive_table=table,
            archived_records=archived,
            deleted_groups=deleted,
            promoted_groups=promoted,
        )
