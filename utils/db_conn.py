import os
import logging
import threading
from typing import Dict
from dotenv import load_dotenv

# Configure logging for database operations
logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "local"


def load_db_settings() -> Dict:
    """Read connection settings for the configured ENVIRONMENT from env vars / .env."""
    load_dotenv()
    environment = os.getenv("ENVIRONMENT", DEFAULT_ENVIRONMENT).lower()
    logger.info(f"Database environment: {environment}")

    if environment == "local":
        prefix = "LOCAL_DB_"
        defaults = {
            "HOST": "localhost",
            "PORT": "3306",
            "USER": "root",
            "PASSWORD": "",
            "NAME": "school_records",
        }
    elif environment == "production" or environment == "online":
        prefix = "ONLINE_DB_"
        defaults = {"HOST": None, "PORT": "3306", "USER": None, "PASSWORD": None, "NAME": None}
    else:
        raise ValueError(
            f"Invalid ENVIRONMENT value: {environment}. Must be 'local' or 'production'/'online'"
        )

    settings = {
        key.lower(): os.getenv(prefix + key, default) for key, default in defaults.items()
    }
    settings["port"] = int(settings["port"])
    settings["environment"] = environment
    return settings


# Use a thread-local container so each thread/request gets its own PyMySQL connection
_local = threading.local()


def _get_thread_conn():
    return getattr(_local, "_connection", None)


def _set_thread_conn(conn):
    setattr(_local, "_connection", conn)


def get_db_connection():
    """Get PyMySQL database connection for current thread. Create if not exists or reconnect if lost.

    Returns a connection object that is safe to use within the current thread. Rows come back
    as dicts (DictCursor), which is the shape the record normalizer expects.
    """
    conn = _get_thread_conn()
    if conn is None or not _is_connection_alive(conn):
        try:
            # Close existing connection if present
            if conn:
                try:
                    conn.close()
                except Exception as close_error:
                    logger.debug(f"Ignoring error closing stale connection: {close_error}")
                _set_thread_conn(None)

            settings = load_db_settings()

            # Import PyMySQL lazily
            import pymysql

            conn = pymysql.connect(
                host=settings["host"],
                port=settings["port"],
                user=settings["user"],
                password=settings["password"],
                database=settings["name"],
                cursorclass=pymysql.cursors.DictCursor,
                autocommit=True,
            )
            _set_thread_conn(conn)
            logger.info(
                f"PyMySQL database connection established for {settings['environment']} (thread-local)"
            )
        except Exception as e:
            logger.error(f"PyMySQL database connection failed: {str(e)}")
            raise e
    return _get_thread_conn()


def _is_connection_alive(conn):
    """Check if the provided connection is alive"""
    if conn is None:
        return False
    try:
        conn.ping(reconnect=False)
        return True
    except Exception:
        return False


def close_db_connection(exception=None):
    """Close and remove the thread-local PyMySQL connection, if present.

    Signature matches Flask's teardown_appcontext callbacks.
    """
    try:
        conn = _get_thread_conn()
        if conn:
            try:
                conn.close()
            except Exception as close_error:
                logger.debug(f"Ignoring error closing connection: {close_error}")
            _set_thread_conn(None)
            logger.info("Thread-local DB connection closed")
    except Exception as e:
        logger.warning(f"Error closing thread-local DB connection: {e}")
