# scripts/check_db.py
# Checks the connection to DATABASE_URL from decorbook.core.config.settings
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from decorbook.core.config import settings
from decorbook.db.session import build_engine

def main():
    url = settings.DATABASE_URL
    print('Trying to connect to:', url)
    engine = build_engine(url)
    try:
        with engine.connect() as conn:
            print('Connection OK, SELECT 1 ->', conn.execute(text("SELECT 1")).scalar())
    except SQLAlchemyError as e:
        print('Connection failed:', e)
    finally:
        engine.dispose()

if __name__ == '__main__':
    main()
