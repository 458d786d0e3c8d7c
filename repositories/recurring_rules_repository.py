import json

from helpers.normalize import normalize_rule_row

_RULE_COLUMNS = """
    id, scope_key, type, name, amount, start_date, cadence,
    months_count, forever, exceptions
"""


def load_for(conn, scope_key):
    """
    Return all recurring rules of a scope in creation order.

    Args:
        conn: Database connection.
        scope_key: Opaque group/user identifier.

    Returns:
        List of RecurringRule.

    Repository-level function: no expansion logic.
    """
    rows = conn.execute(
        f"""
        SELECT {_RULE_COLUMNS}
        FROM recurring_rules
        WHERE scope_key = ?
        ORDER BY seq
        """,
        (scope_key,)
    ).fetchall()

    return [normalize_rule_row(r) for r in rows]


def insert_rule(conn, rule):
    """
    Insert a new recurring rule.

    Args:
        conn: Database connection.
        rule: RecurringRule with its id and scope_key already assigned.
    """
    conn.execute(
        f"""
        INSERT INTO recurring_rules ({_RULE_COLUMNS})
        VALUES (?, ?, ?, ?, CAST(? AS DECIMAL(12,2)), ?, ?, ?, ?, ?)
        """,
        (
            rule.id,
            rule.scope_key,
            rule.type,
            rule.name,
            str(rule.amount),
            rule.start_date,
            rule.cadence,
            None if rule.forever else rule.months_count,
            bool(rule.forever),
            json.dumps(list(rule.exceptions)),
        )
    )


def save_for(conn, scope_key, rules):
    """
    Replace every rule of a scope with ``rules`` in one transaction.
    Rules removed from the list are deleted.
    """
    conn.begin()
    try:
        conn.execute("DELETE FROM recurring_rules WHERE scope_key = ?", (scope_key,))
        for rule in rules:
            rule.scope_key = scope_key
            insert_rule(conn, rule)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
