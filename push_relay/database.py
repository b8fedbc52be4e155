from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def make_session_factory(db_url: str):
	"""Build an engine and session factory for ``db_url``."""
	# If using sqlite, we need to pass connect_args to allow multi-threaded access
	# from FastAPI/uvicorn worker threads.
	connect_args = {}
	if db_url.startswith("sqlite"):
		connect_args = {"check_same_thread": False}

	engine = create_engine(db_url, connect_args=connect_args, future=True)
	return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
