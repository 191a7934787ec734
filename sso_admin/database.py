import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from sso_admin.config import settings

logger = logging.getLogger(__name__)


def make_engine(url):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
    if url.startswith("sqlite"):
        # SQLite 預設不檢查外鍵，ON DELETE CASCADE 需要開啟
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


# 整個程序共用一個連線池
engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """建立所有資料表（已存在的表不會變動）"""
    # 載入所有模型，讓 Base.metadata 完整
    from sso_admin.models import permission, role, user, client, client_user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("資料表已就緒: %s", engine.url.render_as_string(hide_password=True))


def dispose_engine():
    engine.dispose()
    logger.info("資料庫連線池已關閉")
