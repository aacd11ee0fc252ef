from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config['CORS_ORIGINS']
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from drawrelay.main import main
    flask_app.register_blueprint(main)

    # One registry per app; handlers reach it through current_app.extensions
    from drawrelay.rooms import RoomRegistry
    from drawrelay.transport import SocketIOTransport
    from drawrelay.turns import TurnRouter
    flask_app.extensions['drawrelay'] = TurnRouter(
        SocketIOTransport(socketio, namespace=namespace),
        registry=RoomRegistry(),
        logger=flask_app.logger,
    )

    from drawrelay.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('serve')
    @click.option('--host', default=None, help='Bind address (defaults to HOST).')
    @click.option('--port', default=None, type=int, help='Listening port (defaults to PORT).')
    def serve_command(host, port):
        """Runs the drawing relay with websocket support."""
        host = host or flask_app.config['HOST']
        port = port or flask_app.config['PORT']
        click.echo(f'Drawing relay listening on {host}:{port}')
        socketio.run(flask_app, host=host, port=port, allow_unsafe_werkzeug=flask_app.debug)

    flask_app.cli.add_command(serve_command)

    return flask_app
