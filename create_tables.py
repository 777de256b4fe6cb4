"""Create the products and movements tables for the SQL backend."""
import logging

from stockledger import models  # noqa: F401
from stockledger.config import settings
from stockledger.database import Base, engine

logger = logging.getLogger("create_tables")


def main():
    """Create all tables defined in models."""
    if engine.url.get_backend_name() == "sqlite":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Creating database tables on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    main()
