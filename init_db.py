"""
初始化資料庫並寫入初始資料

    python init_db.py               # 建表並補齊初始資料
    python init_db.py --reset       # 刪除所有資料表後重建
    python init_db.py --users 30    # 另外建立 30 個一般用戶
"""
import argparse
import logging

from sso_admin.database import Base, SessionLocal, engine, init_db
from sso_admin.seed import seed_identity_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="初始化 SSO 管理後台資料庫")
    parser.add_argument("--reset", action="store_true", help="刪除所有資料表後重建")
    parser.add_argument("--users", type=int, default=0, help="額外建立的一般用戶數量")
    args = parser.parse_args(argv)

    if args.reset:
        # 先載入模型才能完整刪除
        from sso_admin.models import permission, role, user, client, client_user  # noqa: F401
        Base.metadata.drop_all(bind=engine)
        logger.info("已刪除現有資料表")

    init_db()

    db = SessionLocal()
    try:
        roles = seed_identity_store(db, extra_users=args.users)
        logger.info("初始化完成，角色: %s", ", ".join(roles))
    except Exception:
        db.rollback()
        logger.exception("初始化資料時出錯")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
