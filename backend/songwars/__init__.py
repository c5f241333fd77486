import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def build_actions(flask_app, lookup=None):
    """Construct the game services for one app and wire them together."""
    from songwars.actions import ActionDispatcher
    from songwars.models import Settings
    from songwars.services.battles import BattleEngine
    from songwars.services.broadcast import BroadcastGateway
    from songwars.services.lookup import SongLookupService
    from songwars.services.rooms import PlayerDirectory, RoomRegistry

    cfg = flask_app.config
    seed = cfg.get('RANDOM_SEED')
    rng = random.Random(seed) if seed not in (None, '') else random.Random()

    rooms = RoomRegistry(
        code_length=int(cfg.get('ROOM_CODE_LENGTH', 6)),
        default_settings=Settings(
            genre=cfg.get('DEFAULT_GENRE', 'rap'),
            points_to_win=int(cfg.get('DEFAULT_POINTS_TO_WIN', 5)),
            max_participants=int(cfg.get('DEFAULT_MAX_PARTICIPANTS', 8)),
        ),
        rng=rng,
    )
    players = PlayerDirectory(rooms)
    gateway = BroadcastGateway(socketio)
    if lookup is None:
        lookup = SongLookupService(
            api_key=cfg.get('YOUTUBE_API_KEY'),
            timeout=float(cfg.get('LOOKUP_TIMEOUT_SEC', 5)),
        )

    # In tests the lookup runs inline for determinism
    if cfg.get('TESTING'):
        spawn = None
    else:
        spawn = socketio.start_background_task

    engine = BattleEngine(rooms, gateway, lookup=lookup, rng=rng, spawn=spawn)
    gateway.quorum = engine.quorum
    return ActionDispatcher(rooms, players, engine, gateway)


def create_app(config_class=Config, lookup=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    # Module loggers (songwars.*) propagate to the app logger
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if origins == ['*']:
        origins = '*'
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    flask_app.extensions['songwars'] = build_actions(flask_app, lookup=lookup)

    from songwars.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from songwars.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app
