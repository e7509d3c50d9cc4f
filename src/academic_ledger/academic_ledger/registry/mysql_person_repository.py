from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.datetime_utils import admission_year_from_id
from ..core.enums import PersonKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Person, ScopeAttributes
from .repository import PersonRepository

_COLUMNS = "person_id, name, kind, institution, department, admission_year, roll_no"


def _to_person(r: dict[str, Any]) -> Person:
    admission_year = r.get("admission_year")
    if admission_year is None:
        admission_year = admission_year_from_id(r["person_id"])
    return Person(
        person_id=str(r["person_id"]),
        name=r.get("name") or "",
        kind=PersonKind(r["kind"]),
        scope=ScopeAttributes(
            institution=r["institution"],
            department=r.get("department"),
            admission_year=int(admission_year) if admission_year is not None else None,
            roll_no=r.get("roll_no"),
        ),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, person_id: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM persons WHERE LOWER(person_id)=LOWER(%s)",
                (person_id,),
            )
            r = fetchone(cur)
            return _to_person(r) if r else None

    def list_persons(
        self,
        *,
        kind: Optional[PersonKind] = None,
        institution: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[Person]:
        clauses = ["1=1"]
        params: list[object] = []

        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
        if institution is not None:
            clauses.append("institution=%s")
            params.append(institution)
        if department is not None:
            clauses.append("department=%s")
            params.append(department)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM persons WHERE {where} ORDER BY person_id",
                tuple(params),
            )
            return [_to_person(r) for r in fetchall(cur)]
