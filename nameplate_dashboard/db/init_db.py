from nameplate_dashboard.db.session import get_engine
from nameplate_dashboard.db.base import Base


def init_db():
    # import every model so metadata is complete
    import nameplate_dashboard.models  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
