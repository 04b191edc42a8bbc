from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, JSON,
    ForeignKey, Enum as SQLEnum, UniqueConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from elimina.constants import PlayerRoles
from elimina.data_models.game_date import GameDateStatus

Base = declarative_base()

class Tournament(Base):
    __tablename__ = 'tournaments'
    
    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    number = Column(Integer, nullable=False, unique=True)
    is_active = Column(Boolean, default=True)
    
    # Metadata
    created_at = Column(DateTime, default=func.now())
    
    # Relationships
    participants = relationship("TournamentParticipant", back_populates="tournament", cascade="all, delete-orphan")
    game_dates = relationship("GameDate", back_populates="tournament", order_by="GameDate.date_number")
    
    def __repr__(self):
        return f"<Tournament(number={self.number}, name='{self.name}')>"

class Player(Base):
    __tablename__ = 'players'
    
    id = Column(String(50), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default=PlayerRoles.ENFERMO)
    alias = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)
    
    # ISO date (YYYY-MM-DD) of the latest game date won
    last_victory_date = Column(String(10), nullable=True)
    
    # Metadata
    registered_at = Column(DateTime, default=func.now())
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
    
    def __repr__(self):
        return f"<Player(id='{self.id}', name='{self.full_name}', role='{self.role}')>"

class TournamentParticipant(Base):
    __tablename__ = 'tournament_participants'
    
    id = Column(Integer, primary_key=True)
    tournament_id = Column(Integer, ForeignKey('tournaments.id'), nullable=False)
    player_id = Column(String(50), ForeignKey('players.id'), nullable=False)
    
    # Relationships
    tournament = relationship("Tournament", back_populates="participants")
    player = relationship("Player")
    
    __table_args__ = (
        UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_participant'),
    )

class GameDate(Base):
    __tablename__ = 'game_dates'
    
    id = Column(Integer, primary_key=True)
    tournament_id = Column(Integer, ForeignKey('tournaments.id'), nullable=False)
    date_number = Column(Integer, nullable=False)
    status = Column(SQLEnum(GameDateStatus), default=GameDateStatus.SCHEDULED, nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    
    # Ids of the players taking part in this date
    player_ids = Column(JSON, nullable=False, default=list)
    
    # Relationships
    tournament = relationship("Tournament", back_populates="game_dates")
    eliminations = relationship("Elimination", back_populates="game_date", cascade="all, delete-orphan")
    
    __table_args__ = (
        UniqueConstraint('tournament_id', 'date_number', name='uq_tournament_date_number'),
    )
    
    @property
    def total_players(self) -> int:
        return len(self.player_ids or [])
    
    def __repr__(self):
        return f"<GameDate(tournament_id={self.tournament_id}, number={self.date_number}, status='{self.status.value}')>"

class Elimination(Base):
    __tablename__ = 'eliminations'
    
    id = Column(Integer, primary_key=True)
    game_date_id = Column(Integer, ForeignKey('game_dates.id'), nullable=False)
    position = Column(Integer, nullable=False)
    points = Column(Integer, nullable=False)
    eliminated_player_id = Column(String(50), ForeignKey('players.id'), nullable=False)
    eliminator_player_id = Column(String(50), ForeignKey('players.id'), nullable=True)
    elimination_time = Column(DateTime(timezone=True), nullable=False, default=func.now())
    
    # Relationships
    game_date = relationship("GameDate", back_populates="eliminations")
    
    # Concurrent registrations racing for the same slot or player fail here
    __table_args__ = (
        UniqueConstraint('game_date_id', 'position', name='uq_elimination_position'),
        UniqueConstraint('game_date_id', 'eliminated_player_id', name='uq_elimination_player'),
        Index('idx_elimination_game_date', 'game_date_id'),
    )
    
    def __repr__(self):
        return f"<Elimination(game_date_id={self.game_date_id}, position={self.position}, player='{self.eliminated_player_id}')>"

class ParentChildStat(Base):
    """How often one player (parent) eliminated another (child) in a tournament"""
    __tablename__ = 'parent_child_stats'
    
    id = Column(Integer, primary_key=True)
    tournament_id = Column(Integer, ForeignKey('tournaments.id'), nullable=False)
    parent_player_id = Column(String(50), ForeignKey('players.id'), nullable=False)
    child_player_id = Column(String(50), ForeignKey('players.id'), nullable=False)
    elimination_count = Column(Integer, nullable=False, default=1)
    is_active_relation = Column(Boolean, nullable=False, default=False)
    first_elimination = Column(DateTime, nullable=False)
    last_elimination = Column(DateTime, nullable=False)
    
    __table_args__ = (
        UniqueConstraint('tournament_id', 'parent_player_id', 'child_player_id', name='uq_parent_child_relation'),
    )
    
    def __repr__(self):
        return (f"<ParentChildStat(parent='{self.parent_player_id}', child='{self.child_player_id}', "
                f"count={self.elimination_count})>")
