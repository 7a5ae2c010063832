"""CRUD operations for league.courses and league.holes."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Course, Hole
from models.course import check_hole_numbers
from database.converters import course_from_rows, course_to_row, holes_to_rows
from database.exceptions import DuplicateError, IntegrityError, NotFoundError


class CourseRepositoryDB:
    """Async CRUD for courses and their holes."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble(self, conn, course_row) -> Course:
        """Build a full Course model from a course row + its holes."""
        hole_rows = await conn.fetch(
            "SELECT * FROM league.holes WHERE course_id = $1 ORDER BY number",
            course_row["id"],
        )
        return course_from_rows(course_row, hole_rows)

    # ================================================================
    # Read
    # ================================================================

    async def get_course(self, course_id: str) -> Optional[Course]:
        """Get a fully-populated Course by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.courses WHERE id = $1",
                UUID(course_id),
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def get_course_by_name(
        self, name: str, organization_id: Optional[str] = None
    ) -> Optional[Course]:
        """Case-insensitive exact name lookup within an organization."""
        async with self._pool.acquire() as conn:
            if organization_id:
                row = await conn.fetchrow(
                    """SELECT * FROM league.courses
                       WHERE LOWER(name) = LOWER($1) AND organization_id = $2""",
                    name, UUID(organization_id),
                )
            else:
                row = await conn.fetchrow(
                    """SELECT * FROM league.courses
                       WHERE LOWER(name) = LOWER($1) AND organization_id IS NULL""",
                    name,
                )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def list_courses(self, organization_id: Optional[str] = None) -> List[Course]:
        """All courses (with holes), optionally scoped to one organization."""
        async with self._pool.acquire() as conn:
            if organization_id:
                rows = await conn.fetch(
                    """SELECT * FROM league.courses
                       WHERE organization_id = $1 ORDER BY name""",
                    UUID(organization_id),
                )
            else:
                rows = await conn.fetch("SELECT * FROM league.courses ORDER BY name")
            return [await self._assemble(conn, r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_course(self, course: Course) -> Course:
        """Insert a course and its holes in one transaction."""
        data = course_to_row(course)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        """INSERT INTO league.courses
                               (organization_id, name, tees, par_total, rating, slope)
                           VALUES ($1, $2, $3, $4, $5, $6) RETURNING *""",
                        data["organization_id"], data["name"], data["tees"],
                        data["par_total"], data["rating"], data["slope"],
                    )
                    if course.holes:
                        await conn.executemany(
                            """INSERT INTO league.holes (course_id, number, par, distance)
                               VALUES ($1, $2, $3, $4)""",
                            holes_to_rows(course.holes, row["id"]),
                        )
                    return await self._assemble(conn, row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Course '{course.name}' already exists: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_course(self, course_id: str, **fields) -> Course:
        """Update course fields (name, tees, par_total, rating, slope)."""
        allowed = {"name", "tees", "par_total", "rating", "slope"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            course = await self.get_course(course_id)
            if not course:
                raise NotFoundError(f"Course {course_id} not found")
            return course

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [UUID(course_id)] + list(updates.values())
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE league.courses SET {set_clause} WHERE id = $1 RETURNING *",
                    *values,
                )
                if not row:
                    raise NotFoundError(f"Course {course_id} not found")
                return await self._assemble(conn, row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Course name already in use: {e}") from e

    async def replace_holes(self, course_id: str, holes: List[Hole]) -> Course:
        """Replace every hole of a course in one transaction."""
        try:
            holes = check_hole_numbers(holes)
        except ValueError as e:
            raise IntegrityError(str(e)) from e
        cid = UUID(course_id)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        "SELECT * FROM league.courses WHERE id = $1", cid
                    )
                    if not row:
                        raise NotFoundError(f"Course {course_id} not found")
                    await conn.execute(
                        "DELETE FROM league.holes WHERE course_id = $1", cid
                    )
                    await conn.executemany(
                        """INSERT INTO league.holes (course_id, number, par, distance)
                           VALUES ($1, $2, $3, $4)""",
                        holes_to_rows(holes, cid),
                    )
                    return await self._assemble(conn, row)
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(f"Invalid hole data: {e}") from e

    # ================================================================
    # Delete
    # ================================================================

    async def delete_course(self, course_id: str) -> bool:
        """Delete a course, its holes and rounds (CASCADE). Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM league.courses WHERE id = $1", UUID(course_id)
            )
            return result == "DELETE 1"
