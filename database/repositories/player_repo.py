"""CRUD operations for the league.players table."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Player
from database.converters import player_from_row, player_to_row
from database.exceptions import DuplicateError, NotFoundError


class PlayerRepositoryDB:
    """Async CRUD for players."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_player(self, player_id: str) -> Optional[Player]:
        """Get player by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.players WHERE id = $1", UUID(player_id)
            )
            return player_from_row(row) if row else None

    async def get_player_by_email(self, email: str) -> Optional[Player]:
        """Get player by email (case-insensitive)."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.players WHERE LOWER(email) = LOWER($1)", email
            )
            return player_from_row(row) if row else None

    async def list_players(self, organization_id: Optional[str] = None) -> List[Player]:
        """All players, optionally scoped to one organization, ordered by name."""
        async with self._pool.acquire() as conn:
            if organization_id:
                rows = await conn.fetch(
                    """SELECT * FROM league.players
                       WHERE organization_id = $1 ORDER BY name""",
                    UUID(organization_id),
                )
            else:
                rows = await conn.fetch("SELECT * FROM league.players ORDER BY name")
            return [player_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_player(self, player: Player) -> Player:
        """Create a new player. Returns Player with DB-generated id."""
        data = player_to_row(player)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO league.players
                           (organization_id, name, phone, email, current_handicap, is_admin)
                       VALUES ($1, $2, $3, $4, $5, $6) RETURNING *""",
                    data["organization_id"], data["name"], data["phone"],
                    data["email"], data["current_handicap"], data["is_admin"],
                )
                return player_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Email already in use: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_player(self, player_id: str, **fields) -> Optional[Player]:
        """Update player fields (name, phone, email, current_handicap, is_admin)."""
        allowed = {"name", "phone", "email", "current_handicap", "is_admin"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            return await self.get_player(player_id)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [UUID(player_id)] + list(updates.values())

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE league.players SET {set_clause} WHERE id = $1 RETURNING *",
                    *values,
                )
                return player_from_row(row) if row else None
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Email already in use: {e}") from e

    async def update_handicap(self, player_id: str, handicap: int, conn=None) -> None:
        """Set the player's current handicap.

        Pass `conn` to run inside a caller's transaction.
        """
        if conn is None:
            async with self._pool.acquire() as conn:
                return await self.update_handicap(player_id, handicap, conn)

        result = await conn.execute(
            "UPDATE league.players SET current_handicap = $2 WHERE id = $1",
            UUID(player_id), handicap,
        )
        if result == "UPDATE 0":
            raise NotFoundError(f"Player {player_id} not found")

    # ================================================================
    # Delete
    # ================================================================

    async def delete_player(self, player_id: str) -> bool:
        """Delete player and all their rounds (CASCADE). Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM league.players WHERE id = $1", UUID(player_id)
            )
            return result == "DELETE 1"
