import duckdb
import logging
import os

DB_FILE = os.getenv("CALENDAR_DB_FILE", "calendar.duckdb")
LOG_FILE = os.getenv("CALENDAR_LOG_FILE", "calendar.log")

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=LOG_FILE,
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection.
    """
    return duckdb.connect(DB_FILE)

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db():
    conn = get_db()
    try:
        # Ad-hoc events, one row per scope and date (kept unique by the repository)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS calendar_days (
            scope_key VARCHAR NOT NULL,
            date VARCHAR NOT NULL,
            bills VARCHAR DEFAULT '[]',
            paydays VARCHAR DEFAULT '[]',
            purchases VARCHAR DEFAULT '[]',
            savings VARCHAR DEFAULT '[]',
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Calendar days table ensured.")

        # Recurring rules, kept in creation order via seq
        conn.execute("""
        CREATE SEQUENCE IF NOT EXISTS recurring_rules_seq START 1;
        """)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS recurring_rules (
            seq BIGINT DEFAULT nextval('recurring_rules_seq'),
            id VARCHAR NOT NULL,
            scope_key VARCHAR NOT NULL,
            type VARCHAR NOT NULL,
            name VARCHAR NOT NULL,
            amount DECIMAL(12,2) NOT NULL,
            start_date VARCHAR NOT NULL,
            cadence VARCHAR NOT NULL,
            months_count INTEGER,
            forever BOOLEAN DEFAULT FALSE,
            exceptions VARCHAR DEFAULT '[]'
        );
        """)
        log_info("Recurring rules table ensured.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        conn.close()
        log_info("Database setup complete and connection closed.")
