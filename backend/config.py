import os


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    # Comma-separated allow-list shared by Flask-Cors and Socket.IO
    CORS_ORIGINS = _split_origins(os.environ.get('CORS_ORIGINS', 'http://localhost:3000'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
