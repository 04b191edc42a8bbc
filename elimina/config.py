import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Engine configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///elimina.db')
    
    # Logging settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'True').lower() != 'false'
    
    # Tournament settings
    TOTAL_DATES_PER_TOURNAMENT = int(os.getenv('TOTAL_DATES_PER_TOURNAMENT', 12))
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        if cls.TOTAL_DATES_PER_TOURNAMENT <= 0:
            raise ValueError("TOTAL_DATES_PER_TOURNAMENT must be a positive integer")
