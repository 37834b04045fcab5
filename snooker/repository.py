"""
SQLModel persistence for finished frames.

Stores one row per completed frame and, when one was made, the highest
break of that frame linked to it.
"""

from datetime import date
from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, col, create_engine, select

from snooker.exceptions import PersistenceError
from snooker.models import MatchResult

log = structlog.get_logger(__name__)


class MatchRecord(SQLModel, table=True):
    __tablename__ = "matches"

    id: Optional[int] = Field(default=None, primary_key=True)
    player1_name: str
    player2_name: str
    score1: int
    score2: int
    match_date: date = Field(default_factory=date.today)

    @property
    def score_line(self) -> str:
        return f"{self.score1} : {self.score2}"


class BreakRecord(SQLModel, table=True):
    __tablename__ = "breaks"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    player_name: str
    break_score: int


class MatchRepository:
    """Match history store backed by any SQLAlchemy database URL."""

    def __init__(self, database_url: str):
        try:
            self._engine = create_engine(database_url)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Invalid database URL {database_url!r}: {e}") from e

    def init_db(self):
        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Table initialization failed: {e}") from e

    # ---------------------------------------------------------
    # Writes
    # ---------------------------------------------------------

    def save_match_result(self, player1: str, player2: str, score1: int, score2: int) -> int:
        record = MatchRecord(
            player1_name=player1,
            player2_name=player2,
            score1=score1,
            score2=score2,
        )

        try:
            with Session(self._engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error saving match result: {e}") from e

        log.info("match_saved", match_id=record.id, score=record.score_line)
        return record.id

    def save_highest_break(self, match_id: int, player_name: str, break_score: int) -> int:
        record = BreakRecord(
            match_id=match_id,
            player_name=player_name,
            break_score=break_score,
        )

        try:
            with Session(self._engine) as session:
                if session.get(MatchRecord, match_id) is None:
                    raise PersistenceError(f"Match not found: {match_id}")
                session.add(record)
                session.commit()
                session.refresh(record)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error saving highest break: {e}") from e

        return record.id

    def record_result(self, player1: str, player2: str, result: MatchResult) -> int:
        """
        Save a finished frame and its highest break (if any) in one transaction.

        Nothing is written when either insert fails.
        """
        match = MatchRecord(
            player1_name=player1,
            player2_name=player2,
            score1=result.score_1,
            score2=result.score_2,
        )

        with Session(self._engine) as session:
            try:
                session.add(match)
                session.flush()
                match_id = match.id

                if result.highest_break_player is not None:
                    owner = player1 if result.highest_break_player == 1 else player2
                    session.add(BreakRecord(
                        match_id=match_id,
                        player_name=owner,
                        break_score=result.highest_break,
                    ))

                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Error recording result: {e}") from e

        log.info("result_recorded", match_id=match_id, score=f"{result.score_1} : {result.score_2}")
        return match_id

    def delete_match(self, match_id: int) -> bool:
        try:
            with Session(self._engine) as session:
                record = session.get(MatchRecord, match_id)
                if record is None:
                    return False

                breaks = session.exec(
                    select(BreakRecord).where(BreakRecord.match_id == match_id)
                ).all()
                for b in breaks:
                    session.delete(b)

                session.delete(record)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error deleting match: {e}") from e

        log.info("match_deleted", match_id=match_id)
        return True

    # ---------------------------------------------------------
    # Reads
    # ---------------------------------------------------------

    def list_matches(self) -> List[MatchRecord]:
        statement = select(MatchRecord).order_by(
            col(MatchRecord.match_date).desc(),
            col(MatchRecord.id).desc(),
        )

        try:
            with Session(self._engine) as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error listing matches: {e}") from e

    def breaks_for(self, match_id: int) -> List[BreakRecord]:
        statement = select(BreakRecord).where(BreakRecord.match_id == match_id)

        try:
            with Session(self._engine) as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error reading breaks: {e}") from e
