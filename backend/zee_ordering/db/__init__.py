import importlib

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from zee_ordering.config import settings
from zee_ordering.utils.logger import get_logger

log = get_logger("db")

DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # request handlers run in a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# model modules that must be imported so Base.metadata is populated
MODEL_MODULES = [
    "zee_ordering.models.product",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    With ``reset=True`` every table is dropped and recreated, otherwise
    existing tables are left in place.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.info("Resetting database (dropping all tables)")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
