"""Single application entry point for the Live TV channel directory."""

import logging
import sys

from .config import config
from .models import init_db
from .seed import SeedLoader
from .storage import KeyValueStorage
from .store import ChannelStore
from .web import create_app, socketio

logger = logging.getLogger(__name__)

def setup_logging():
    """Setup logging configuration."""
    config.ensure_directories()

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(config.LOG_FILE),
            logging.StreamHandler(sys.stdout)
        ]
    )

class LiveTVApp:
    """Owns the process-wide channel store and serves it over HTTP."""

    def __init__(self):
        self.store = None
        self.app = None

    def setup(self):
        """Initialize storage, load channels and build the web app."""
        setup_logging()
        logger.info("Starting Live TV Application")

        init_db()
        self.store = ChannelStore(KeyValueStorage(), seed_loader=SeedLoader())
        self.store.load()
        if self.store.load_warning:
            logger.warning(f"Channels loaded with warning: {self.store.load_warning}")

        self.app = create_app(self.store)

    def run(self):
        """Run the complete Live TV application."""
        try:
            self.setup()

            logger.info(f"Starting web server on {config.FLASK_HOST}:{config.FLASK_PORT}")
            socketio.run(
                self.app,
                host=config.FLASK_HOST,
                port=config.FLASK_PORT,
                debug=config.DEBUG,
                use_reloader=False,
                allow_unsafe_werkzeug=True
            )

        except KeyboardInterrupt:
            logger.info("Live TV application stopped by user")
        except Exception as e:
            logger.error(f"Live TV application error: {e}")
            sys.exit(1)

def main():
    """Main entry point."""
    LiveTVApp().run()

if __name__ == "__main__":
    main()
