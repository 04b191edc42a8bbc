from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from elimina.config import Config
from elimina.database.models import Base
from elimina.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: str = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.session_factory = None
        
    def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")
        
        self.engine = create_engine(
            self.database_url,
            echo=Config.DEBUG,
            future=True
        )
        
        self.session_factory = sessionmaker(
            self.engine,
            expire_on_commit=False
        )
        
        # Create all tables
        Base.metadata.create_all(self.engine)
        
        self.logger.info("Database initialized successfully")
    
    @contextmanager
    def get_session(self):
        """Get a database session"""
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    
    @contextmanager
    def transaction(self):
        """
        Create a transaction boundary for atomic operations.
        
        Everything done with the yielded session commits together on success
        or rolls back together on failure. Run a whole elimination operation
        inside one transaction so its checks and writes see the same state.
        
        Usage:
            with db.transaction() as session:
                operations = build_elimination_operations(session)
                result = operations.register_elimination(command)
        
        Exceptions must be allowed to propagate out of the context for
        rollback to occur.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    
    def close(self):
        """Close the database connection"""
        if self.engine:
            self.engine.dispose()
            self.logger.info("Database connection closed")
