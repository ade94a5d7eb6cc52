from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from zkmul.binding import ProofSystem
from zkmul.config import Settings
from zkmul.log import get_logger, setup_logging

from api_routes import api_bp, init_api_bp


log = get_logger(__name__)


def create_app(settings=None):
    """Flask 앱을 만든다. 세션 상태는 모두 메모리에만 있다."""
    if settings is None:
        settings = Settings()
    setup_logging(settings.log_level, settings.log_format)

    app = Flask(__name__)
    app.config["ZKMUL_SETTINGS"] = settings

    db = TinyDB(storage=MemoryStorage)  # Memory DB
    proof_system = ProofSystem(seed=settings.seed, bounds=settings.bounds)
    init_api_bp(db, proof_system)
    app.register_blueprint(api_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "zkmul",
            "seed": settings.seed,
            "bounds": settings.bounds.as_tuple(),
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules()
                if str(rule).startswith("/api/")
            ),
        })

    log.info("app.created", seed=settings.seed,
             bounds=list(settings.bounds.as_tuple()))
    return app


def main():
    settings = Settings()
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
