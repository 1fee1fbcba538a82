import logging
import os
import sys
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_wtf.csrf import CSRFProtect
from utils.db_conn import close_db_connection, get_db_connection

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()

# Create Flask app
app = Flask(__name__)
app.secret_key = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

# Initialize CSRF protection
csrf = CSRFProtect(app)

# Each request thread closes its PyMySQL connection when the app context ends
app.teardown_appcontext(close_db_connection)


def check_database_connectivity():
    """Attempt a simple DB connection and SELECT 1. Return (ok: bool, message: str)."""
    try:
        conn = get_db_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return True, "Connected and SELECT 1 succeeded"
    except Exception as e:
        return False, f"DB connection failed: {e}"


def run_startup_checks_or_exit():
    """Run preflight checks and exit the process on failure."""
    logger.info("Running startup checks...")
    ok_db, db_msg = check_database_connectivity()
    if ok_db:
        logger.info(f"Database check passed: {db_msg}")
        return
    logger.error(f"Database check failed: {db_msg}")
    logger.error("Startup checks failed. Aborting launch.")
    sys.exit(1)


# API: GET "/welcome"
# Used by: Health-check or quick connectivity tests
@app.route("/welcome", methods=["GET"])
def welcome():
    logger.info(f"Request received: {request.method} {request.path}")
    return jsonify({"message": "Student performance service is running"})


from blueprints.performance_routes import performance_bp

# JSON API consumed by the dashboard and report-card views; no HTML forms
csrf.exempt(performance_bp)
app.register_blueprint(performance_bp)


if __name__ == "__main__":
    logger.info("Application startup initiated")
    run_startup_checks_or_exit()

    # Only start the reloader in development
    use_reloader = os.environ.get("WERKZEUG_RUN_MAIN") != "true"

    app.run(host="127.0.0.1", port=5000, debug=True, use_reloader=use_reloader)
