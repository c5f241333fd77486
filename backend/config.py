import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Song lookup (YouTube Data API). Missing key disables lookups.
    YOUTUBE_API_KEY = os.environ.get('YOUTUBE_API_KEY')
    LOOKUP_TIMEOUT_SEC = float(os.environ.get('LOOKUP_TIMEOUT_SEC', '5'))
    # Room defaults
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    DEFAULT_GENRE = os.environ.get('DEFAULT_GENRE', 'rap')
    DEFAULT_POINTS_TO_WIN = int(os.environ.get('DEFAULT_POINTS_TO_WIN', '5'))
    DEFAULT_MAX_PARTICIPANTS = int(os.environ.get('DEFAULT_MAX_PARTICIPANTS', '8'))
    # Optional: fixed seed for battler selection and tie breaks. Unset uses system entropy.
    RANDOM_SEED = os.environ.get('RANDOM_SEED')
