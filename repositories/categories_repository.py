from db import fetch_dicts

# -----------------------------
# Categories Repository
# -----------------------------

def category_names(conn):
    """Map of category id to display name."""
    rows = fetch_dicts(conn.execute("SELECT id, name FROM categories"))
    return {row["id"]: row["name"] for row in rows}
