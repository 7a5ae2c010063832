import asyncpg
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from database.converters import (
    course_from_rows,
    holes_to_rows,
    leaderboard_entry_to_row,
    round_from_row,
    round_to_row,
    settings_from_row,
    snapshot_from_row,
    snapshot_to_row,
    winner_to_row,
)
from database.db_manager import DatabaseManager
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    InvalidUpdateError,
    NotFoundError,
)
from database.repositories.course_repo import CourseRepositoryDB
from database.repositories.handicap_repo import HandicapSnapshotRepositoryDB
from database.repositories.leaderboard_repo import LeaderboardRepositoryDB
from database.repositories.player_repo import PlayerRepositoryDB
from database.repositories.round_repo import RoundRepositoryDB
from database.repositories.settings_repo import SeasonSettingsRepositoryDB
from models import Course, HandicapSnapshot, Hole, LeaderboardEntry, MonthlyWinner, Player, Round


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def _with_transaction(conn):
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()


def _player_row(player_id=None, *, name="Alice", handicap=10):
    """Helper: league.players row dict."""
    return {
        "id": player_id or uuid4(),
        "organization_id": None,
        "name": name,
        "phone": None,
        "email": "alice@example.com",
        "current_handicap": handicap,
        "is_admin": False,
        "created_at": None,
    }


def _course_row(course_id=None, *, slope=None):
    """Helper: league.courses row dict."""
    return {
        "id": course_id or uuid4(),
        "organization_id": None,
        "name": "Willingdon",
        "tees": "Blue",
        "par_total": 72,
        "rating": Decimal("70.4") if slope else None,
        "slope": slope,
    }


def _hole_rows(course_id, par=4):
    return [
        {"id": uuid4(), "course_id": course_id, "number": n, "par": par, "distance": None}
        for n in range(1, 19)
    ]


def _round_row(round_id=None, *, raw=5):
    """Helper: league.rounds row dict for a round of all `raw` on a par-72 course."""
    gross = raw * 18
    return {
        "id": round_id or uuid4(),
        "player_id": uuid4(),
        "course_id": uuid4(),
        "played_on": date(2025, 6, 14),
        "raw_scores": [raw] * 18,
        "capped_scores": [raw] * 18,
        "gross_capped": gross,
        "course_handicap": 10,
        "net": gross - 10,
        "over_par": Decimal(f"{gross - 72}.0"),
        "source": "app",
        "status": "ok",
        "created_at": None,
    }


def _snapshot_row(player_id=None, month="2025-06"):
    return {
        "id": uuid4(),
        "player_id": player_id or uuid4(),
        "month": month,
        "prev_handicap": 10,
        "rounds_count": 2,
        "avg_monthly_over_par": Decimal("20.00"),
        "delta": Decimal("2.00"),
        "new_handicap": 12,
        "created_at": None,
    }


def _settings_row(**overrides):
    row = {
        "id": 1,
        "organization_id": None,
        "group_name": "Blues Golf Challenge",
        "season_end": date(2026, 3, 31),
        "leaderboard_metric": "avg_over_par",
        "k_factor": Decimal("0.50"),
        "change_cap": Decimal("2.0"),
    }
    row.update(overrides)
    return row


def _winner_row(month="2025-06"):
    return {
        "id": uuid4(),
        "organization_id": None,
        "month": month,
        "winner_id": uuid4(),
        "winner_name": "Alice",
        "winner_score": Decimal("8.0"),
        "runner_up_id": None,
        "runner_up_name": None,
        "runner_up_score": None,
        "announced_by": None,
        "announced_at": None,
    }


# ================================================================
# converters.py: pure function tests (no mocks needed)
# ================================================================

def test_round_converter_maps_numeric_and_arrays():
    rid = uuid4()
    r = round_from_row(_round_row(rid))

    assert r.id == str(rid)
    assert isinstance(r.over_par, float)
    assert r.over_par == 18.0
    assert r.raw_scores == [5] * 18
    assert r.month == "2025-06"


def test_round_to_row_converts_ids():
    r = round_from_row(_round_row())
    data = round_to_row(r)

    assert str(data["player_id"]) == r.player_id
    assert data["over_par"] == 18.0
    assert data["source"] == "app"
    assert len(data["capped_scores"]) == 18


def test_course_converter_assembles_holes():
    cid = uuid4()
    rows = list(reversed(_hole_rows(cid)))
    course = course_from_rows(_course_row(cid, slope=Decimal("128")), rows)

    assert course.id == str(cid)
    assert course.slope == 128.0
    assert course.rating == 70.4
    assert course.is_complete()
    assert [h.number for h in course.holes] == list(range(1, 19))
    assert course.holes[0].course_id == str(cid)


def test_holes_to_rows():
    cid = uuid4()
    rows = holes_to_rows([Hole(number=1, par=4, distance=380), Hole(number=2, par=3)], cid)
    assert rows == [(cid, 1, 4, 380), (cid, 2, 3, None)]


def test_snapshot_converters():
    snap = snapshot_from_row(_snapshot_row())
    assert snap.avg_monthly_over_par == 20.0
    assert snap.delta == 2.0

    row = snapshot_to_row(snap)
    assert len(row) == 7
    assert str(row[0]) == snap.player_id
    assert row[1] == "2025-06"
    assert row[6] == 12


def test_snapshot_converter_null_average():
    row = _snapshot_row()
    row.update(rounds_count=0, avg_monthly_over_par=None, delta=Decimal("0"), new_handicap=10)
    snap = snapshot_from_row(row)

    assert snap.avg_monthly_over_par is None
    assert not snap.changed


def test_settings_converter_decimals():
    settings = settings_from_row(_settings_row())
    assert settings.k_factor == 0.5
    assert settings.change_cap == 2.0
    assert settings.id == 1


def test_leaderboard_and_winner_to_row():
    entry = LeaderboardEntry(
        player_id=str(uuid4()), player_name="Alice", current_handicap=10, rounds_count=2,
        avg_net=71.0, avg_over_par=9.0, avg_dth=-1.0, avg_gross_capped=81.0,
        last_round_date=date(2025, 6, 30), rank=1, is_finalized=True,
    )
    row = leaderboard_entry_to_row(entry, "2025-06")
    assert len(row) == 13
    assert row[1] == "2025-06"
    assert row[9] == 1
    assert row[11] is True
    assert row[12] is None

    org = uuid4()
    assert leaderboard_entry_to_row(entry, "2025-06", str(org))[12] == org

    winner = MonthlyWinner(month="2025-06", winner_id=str(uuid4()), winner_name="Alice",
                           winner_score=-1.0)
    row = winner_to_row(winner)
    assert len(row) == 9
    assert row[4] is None    # runner_up_id
    assert row[7] is None    # announced_by
    assert row[8] is None    # organization_id


# ================================================================
# PlayerRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_player_repo_get_player(mock_pool):
    pool, conn = mock_pool
    repo = PlayerRepositoryDB(pool)

    pid = uuid4()
    conn.fetchrow.return_value = _player_row(pid)
    p = await repo.get_player(str(pid))

    assert p.id == str(pid)
    assert p.current_handicap == 10

    conn.fetchrow.return_value = None
    assert await repo.get_player(str(uuid4())) is None


@pytest.mark.asyncio
async def test_player_repo_create_duplicate_email(mock_pool):
    pool, conn = mock_pool
    repo = PlayerRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

    with pytest.raises(DuplicateError):
        await repo.create_player(Player(name="Alice", email="alice@example.com", current_handicap=10))


@pytest.mark.asyncio
async def test_player_repo_update_player_ignores_unknown_fields(mock_pool):
    pool, conn = mock_pool
    repo = PlayerRepositoryDB(pool)

    pid = uuid4()
    conn.fetchrow.return_value = _player_row(pid, name="Alicia")
    p = await repo.update_player(str(pid), name="Alicia", organization_id="x")

    assert p.name == "Alicia"
    sql = conn.fetchrow.call_args[0][0]
    assert "name = $2" in sql
    assert "organization_id" not in sql


@pytest.mark.asyncio
async def test_player_repo_update_handicap(mock_pool):
    pool, conn = mock_pool
    repo = PlayerRepositoryDB(pool)

    conn.execute.return_value = "UPDATE 1"
    await repo.update_handicap(str(uuid4()), 12)
    assert conn.execute.call_args[0][2] == 12

    conn.execute.return_value = "UPDATE 0"
    with pytest.raises(NotFoundError):
        await repo.update_handicap(str(uuid4()), 12)


@pytest.mark.asyncio
async def test_player_repo_update_handicap_uses_given_connection(mock_pool):
    pool, conn = mock_pool
    repo = PlayerRepositoryDB(pool)

    tx_conn = AsyncMock()
    tx_conn.execute.return_value = "UPDATE 1"
    await repo.update_handicap(str(uuid4()), 7, conn=tx_conn)

    tx_conn.execute.assert_awaited_once()
    pool.acquire.assert_not_called()


# ================================================================
# CourseRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_course_repo_get_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid)
    conn.fetch.return_value = _hole_rows(cid)

    c = await repo.get_course(str(cid))
    assert c.name == "Willingdon"
    assert c.calculated_par == 72
    assert c.slope is None


@pytest.mark.asyncio
async def test_course_repo_get_course_not_found(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_course(str(uuid4())) is None
    conn.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_create_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    _with_transaction(conn)

    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid)
    conn.fetch.return_value = _hole_rows(cid)

    course = Course(name="Willingdon", par_total=72,
                    holes=[Hole(number=n, par=4) for n in range(1, 19)])
    saved = await repo.create_course(course)

    assert saved.id == str(cid)
    conn.executemany.assert_called_once()
    sql, tuples = conn.executemany.call_args[0]
    assert "league.holes" in sql
    assert len(tuples) == 18
    assert tuples[0] == (cid, 1, 4, None)


@pytest.mark.asyncio
async def test_course_repo_create_duplicate(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    _with_transaction(conn)
    conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

    with pytest.raises(DuplicateError):
        await repo.create_course(Course(name="Willingdon", par_total=72))


@pytest.mark.asyncio
async def test_course_repo_replace_holes_rejects_duplicates(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    holes = [Hole(number=1, par=4), Hole(number=1, par=5)]
    with pytest.raises(IntegrityError):
        await repo.replace_holes(str(uuid4()), holes)
    pool.acquire.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_replace_holes(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    _with_transaction(conn)

    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid)
    conn.fetch.return_value = _hole_rows(cid, par=3)

    course = await repo.replace_holes(str(cid), [Hole(number=n, par=3) for n in range(1, 19)])

    assert course.hole_pars() == [3] * 18
    delete_sql = conn.execute.call_args[0][0]
    assert "DELETE FROM league.holes" in delete_sql


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_get_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    rid = uuid4()
    conn.fetchrow.return_value = _round_row(rid)
    r = await repo.get_round(str(rid))
    assert r.gross_capped == 90

    conn.fetchrow.return_value = None
    assert await repo.get_round(str(uuid4())) is None


@pytest.mark.asyncio
async def test_round_repo_create_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    row = _round_row()
    conn.fetchrow.return_value = row
    r = Round(
        player_id=str(row["player_id"]), course_id=str(row["course_id"]),
        played_on=date(2025, 6, 14), raw_scores=[5] * 18, capped_scores=[5] * 18,
        gross_capped=90, course_handicap=10, net=80, over_par=18.0,
    )
    saved = await repo.create_round(r)

    assert saved.id == str(row["id"])
    sql = conn.fetchrow.call_args[0][0]
    assert "INSERT INTO league.rounds" in sql


@pytest.mark.asyncio
async def test_round_repo_create_round_unknown_player(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.side_effect = asyncpg.ForeignKeyViolationError("fk")

    r = round_from_row(_round_row())
    with pytest.raises(IntegrityError):
        await repo.create_round(r)


@pytest.mark.asyncio
async def test_round_repo_rounds_for_player_month_filter(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetch.return_value = [_round_row(), _round_row(raw=4)]

    pid = uuid4()
    rounds = await repo.get_rounds_for_player(str(pid), month="2025-06")

    assert len(rounds) == 2
    args = conn.fetch.call_args[0]
    assert args[1] == pid
    assert args[2] == "2025-06"


@pytest.mark.asyncio
async def test_round_repo_update_scores_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.update_scores(round_from_row(_round_row()))


@pytest.mark.asyncio
async def test_round_repo_delete(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    conn.execute.return_value = "DELETE 1"
    assert await repo.delete_round(str(uuid4())) is True

    conn.execute.return_value = "DELETE 0"
    assert await repo.delete_round(str(uuid4())) is False


# ================================================================
# HandicapSnapshotRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_handicap_repo_players_done_for_month(mock_pool):
    pool, conn = mock_pool
    repo = HandicapSnapshotRepositoryDB(pool)

    a, b = uuid4(), uuid4()
    conn.fetch.return_value = [{"player_id": a}, {"player_id": b}]

    done = await repo.players_done_for_month("2025-06")
    assert done == {str(a), str(b)}


@pytest.mark.asyncio
async def test_handicap_repo_create_snapshot(mock_pool):
    pool, conn = mock_pool
    repo = HandicapSnapshotRepositoryDB(pool)

    pid = uuid4()
    conn.fetchrow.return_value = _snapshot_row(pid)
    snap = HandicapSnapshot(player_id=str(pid), month="2025-06", prev_handicap=10, rounds_count=2,
                            avg_monthly_over_par=20.0, delta=2.0, new_handicap=12)
    saved = await repo.create_snapshot(snap)

    assert saved.id is not None
    assert saved.new_handicap == 12
    args = conn.fetchrow.call_args[0]
    assert "INSERT INTO league.handicap_snapshots" in args[0]
    assert args[1:] == snapshot_to_row(snap)


@pytest.mark.asyncio
async def test_handicap_repo_create_snapshot_duplicate(mock_pool):
    pool, conn = mock_pool
    repo = HandicapSnapshotRepositoryDB(pool)

    tx_conn = AsyncMock()
    tx_conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")
    snap = HandicapSnapshot(player_id=str(uuid4()), month="2025-06", prev_handicap=10,
                            rounds_count=0, delta=0.0, new_handicap=10)

    with pytest.raises(DuplicateError):
        await repo.create_snapshot(snap, conn=tx_conn)
    pool.acquire.assert_not_called()


# ================================================================
# SeasonSettingsRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_settings_repo_creates_defaults(mock_pool):
    pool, conn = mock_pool
    repo = SeasonSettingsRepositoryDB(pool)
    conn.fetchrow.side_effect = [None, _settings_row()]

    settings = await repo.get_settings()

    assert settings.k_factor == 0.5
    insert_sql = conn.fetchrow.call_args_list[1][0][0]
    assert "INSERT INTO league.season_settings" in insert_sql


@pytest.mark.asyncio
async def test_settings_repo_existing_row(mock_pool):
    pool, conn = mock_pool
    repo = SeasonSettingsRepositoryDB(pool)
    conn.fetchrow.return_value = _settings_row(k_factor=Decimal("0.25"))

    settings = await repo.get_settings(str(uuid4()))

    assert settings.k_factor == 0.25
    conn.fetchrow.assert_called_once()


@pytest.mark.asyncio
async def test_settings_repo_update(mock_pool):
    pool, conn = mock_pool
    repo = SeasonSettingsRepositoryDB(pool)
    conn.fetchrow.side_effect = [_settings_row(), _settings_row(change_cap=Decimal("3.0"))]

    settings = await repo.update_settings(change_cap=3.0)

    assert settings.change_cap == 3.0
    args = conn.fetchrow.call_args[0]
    assert "change_cap = $2" in args[0]
    assert args[1:] == (1, 3.0)


@pytest.mark.asyncio
async def test_settings_repo_update_rejects_invalid_values(mock_pool):
    pool, conn = mock_pool
    repo = SeasonSettingsRepositoryDB(pool)
    conn.fetchrow.return_value = _settings_row()

    with pytest.raises(InvalidUpdateError) as exc_info:
        await repo.update_settings(k_factor=5, group_name="Tuesday Group")
    assert set(exc_info.value.errors) == {"k_factor"}
    conn.fetchrow.assert_called_once()


# ================================================================
# LeaderboardRepositoryDB
# ================================================================

def _entry(rank=1):
    return LeaderboardEntry(
        player_id=str(uuid4()), player_name=f"Player {rank}", current_handicap=10,
        rounds_count=1, avg_net=80.0, avg_over_par=18.0, avg_dth=8.0,
        avg_gross_capped=90.0, last_round_date=date(2025, 6, 1), rank=rank,
        month="2025-06", is_finalized=True,
    )


@pytest.mark.asyncio
async def test_leaderboard_repo_save_snapshot(mock_pool):
    pool, conn = mock_pool
    repo = LeaderboardRepositoryDB(pool)
    _with_transaction(conn)

    await repo.save_snapshot("2025-06", [_entry(1), _entry(2)])

    assert conn.execute.call_args[0][1] == "2025-06"
    assert conn.execute.call_args[0][2] is None
    sql, tuples = conn.executemany.call_args[0]
    assert "INSERT INTO league.monthly_leaderboards" in sql
    assert [t[9] for t in tuples] == [1, 2]


@pytest.mark.asyncio
async def test_leaderboard_repo_save_empty_snapshot(mock_pool):
    pool, conn = mock_pool
    repo = LeaderboardRepositoryDB(pool)
    _with_transaction(conn)

    await repo.save_snapshot("2025-06", [])

    conn.execute.assert_awaited_once()
    conn.executemany.assert_not_called()


@pytest.mark.asyncio
async def test_leaderboard_repo_winner(mock_pool):
    pool, conn = mock_pool
    repo = LeaderboardRepositoryDB(pool)

    conn.fetchrow.return_value = _winner_row()
    winner = await repo.get_winner("2025-06")
    assert winner.winner_name == "Alice"
    assert winner.winner_score == 8.0

    conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")
    with pytest.raises(DuplicateError):
        await repo.create_winner(winner)


@pytest.mark.asyncio
async def test_leaderboard_repo_snapshots_are_scoped_per_organization(mock_pool):
    pool, conn = mock_pool
    repo = LeaderboardRepositoryDB(pool)
    _with_transaction(conn)

    org_a, org_b = uuid4(), uuid4()
    await repo.save_snapshot("2025-06", [_entry(1)], str(org_a))
    await repo.save_snapshot("2025-06", [_entry(1), _entry(2)], str(org_b))

    deletes = [c[0] for c in conn.execute.call_args_list]
    assert all("organization_id IS NOT DISTINCT FROM $2" in d[0] for d in deletes)
    assert [d[1:] for d in deletes] == [("2025-06", org_a), ("2025-06", org_b)]

    inserted = [c[0][1] for c in conn.executemany.call_args_list]
    assert [t[12] for t in inserted[0]] == [org_a]
    assert [t[12] for t in inserted[1]] == [org_b, org_b]


@pytest.mark.asyncio
async def test_leaderboard_repo_reads_are_scoped_per_organization(mock_pool):
    pool, conn = mock_pool
    repo = LeaderboardRepositoryDB(pool)
    org = uuid4()

    conn.fetch.return_value = []
    await repo.get_snapshot("2025-06", str(org))
    assert conn.fetch.call_args[0][1:] == ("2025-06", org)

    await repo.get_finalized_entries(str(org))
    assert conn.fetch.call_args[0][1:] == (org,)

    row = _winner_row()
    row["organization_id"] = org
    conn.fetchrow.return_value = row
    winner = await repo.get_winner("2025-06", str(org))
    assert conn.fetchrow.call_args[0][1:] == ("2025-06", org)
    assert winner.organization_id == str(org)

    conn.fetchrow.reset_mock()
    await repo.create_winner(winner)
    assert conn.fetchrow.call_args[0][-1] == org


# ================================================================
# DatabaseManager
# ================================================================

@pytest.mark.asyncio
async def test_manager_initialize_schema(mock_pool, tmp_path):
    pool, conn = mock_pool
    _with_transaction(conn)
    schema = tmp_path / "schema.sql"
    schema.write_text("CREATE SCHEMA IF NOT EXISTS league;", encoding="utf-8")

    manager = DatabaseManager(pool)
    await manager.initialize_schema(schema)

    conn.execute.assert_awaited_once_with("CREATE SCHEMA IF NOT EXISTS league;")


@pytest.mark.asyncio
async def test_manager_initialize_schema_missing_file(mock_pool, tmp_path):
    pool, _ = mock_pool
    manager = DatabaseManager(pool)

    with pytest.raises(DatabaseError):
        await manager.initialize_schema(tmp_path / "missing.sql")


def test_schema_scopes_boards_and_keeps_delta_precision():
    from database.db_manager import SCHEMA_PATH

    sql = SCHEMA_PATH.read_text(encoding="utf-8")

    assert "CHAR(7) NOT NULL UNIQUE" not in sql
    winners_index = sql[sql.index("monthly_winners_org_month_uq"):]
    assert "organization_id" in winners_index.split(";")[0]
    assert "delta                 NUMERIC(6,3) NOT NULL" in sql
