# database/db_connector.py
import logging
import psycopg2
import config

logger = logging.getLogger(__name__)


def connection_settings():
    """
    Keyword arguments for psycopg2.connect

    DATABASE_URL wins over the individual DB_* settings; unset settings are
    left to libpq defaults.
    """
    if config.DATABASE_URL:
        settings = {'dsn': config.DATABASE_URL}
    else:
        settings = {
            'dbname': config.DB_NAME,
            'user': config.DB_USER,
            'password': config.DB_PASSWORD,
            'host': config.DB_HOST,
            'port': config.DB_PORT
        }
        settings = {key: value for key, value in settings.items() if value}
    settings['connect_timeout'] = config.DB_CONNECT_TIMEOUT
    return settings


def get_db_connection():
    """Open a new connection to the recipe database"""
    settings = connection_settings()
    target = 'DATABASE_URL' if 'dsn' in settings else f"{settings.get('host', 'localhost')}:{settings.get('port', 5432)}"
    logger.info(f"Connecting to database via {target}")
    try:
        return psycopg2.connect(**settings)
    except psycopg2.Error as e:
        logger.error(f"Failed to connect to database via {target}: {str(e)}")
        raise


def create_tables_if_not_exist(connection_factory=get_db_connection):
    """Create the recipes table and its index if they don't exist"""
    conn = connection_factory()
    try:
        with conn.cursor() as cursor:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id SERIAL PRIMARY KEY,
                    title VARCHAR(255) NOT NULL DEFAULT '',
                    data JSONB NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_recipes_title ON recipes(title);
                CREATE INDEX IF NOT EXISTS idx_recipes_created_at ON recipes(created_at);
            """)

            conn.commit()
            logger.info("Database tables created successfully")
    except Exception as e:
        conn.rollback()
        logger.error(f"Error creating database tables: {str(e)}")
        raise
    finally:
        conn.close()
