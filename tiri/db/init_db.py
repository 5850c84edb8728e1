from sqlalchemy.engine import Engine

from tiri.core.logger import logger
from tiri.db.base import Base
from tiri.db.session import engine as default_engine
import tiri.models  # noqa: F401  registers the tables on Base.metadata


def init_db(engine: Engine = None) -> None:
    engine = engine or default_engine

    logger.info("DB INIT STARTED")
    Base.metadata.create_all(bind=engine)
    logger.info("DB TABLES CREATED")
