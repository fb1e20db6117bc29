import os

_DEFAULT_ORIGINS = (
    "http://localhost:5173,"
    "http://127.0.0.1:5173,"
    "http://localhost:5174,"
    "http://127.0.0.1:5174"
)

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8787'))
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', _DEFAULT_ORIGINS).split(',') if o.strip()]
    # Seconds between liveness pings per connection. 0 disables.
    LIVENESS_INTERVAL_SEC = int(os.environ.get('LIVENESS_INTERVAL_SEC', '30'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
