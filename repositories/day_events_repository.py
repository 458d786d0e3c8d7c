from helpers.normalize import encode_items, normalize_day_row
from models.calendar_models import CATEGORIES

# -----------------------------
# Ad-hoc Day Events Repository
# -----------------------------

def load_for(conn, scope_key):
    """
    Return ``{date_key: DayEvents}`` for every ad-hoc day stored in a scope.
    - conn: DuckDB connection
    - scope_key: opaque group/user identifier
    """
    rows = conn.execute(
        """
        SELECT date, bills, paydays, purchases, savings
        FROM calendar_days
        WHERE scope_key = ?
        ORDER BY date
        """,
        (scope_key,)
    ).fetchall()

    events = {}
    for row in rows:
        key, day = normalize_day_row(row)
        events[key] = day
    return events


def _insert_day(conn, scope_key, date_key, day):
    conn.execute(
        """
        INSERT INTO calendar_days (scope_key, date, bills, paydays, purchases, savings)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (scope_key, date_key, *(encode_items(day.category(name)) for name in CATEGORIES))
    )


def save_for(conn, scope_key, events):
    """
    Replace every ad-hoc day of a scope with ``events`` in one transaction.
    """
    conn.begin()
    try:
        conn.execute("DELETE FROM calendar_days WHERE scope_key = ?", (scope_key,))
        for date_key in sorted(events):
            _insert_day(conn, scope_key, date_key, events[date_key])
        conn.commit()
    except Exception:
        conn.rollback()
        raise
