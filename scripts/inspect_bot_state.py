#!/usr/bin/env python3
"""
Helper script to inspect the bot's SQLite state database.

Prints the most recently updated keyed_store rows, optionally filtered by
namespace or sender.

Usage:
    python scripts/inspect_bot_state.py [--db PATH] [--namespace NAME] [--key ID] [--limit N]
"""

import argparse
import json
import sqlite3
import time
from pathlib import Path


def inspect_database(db_path: str, namespace: str = None, key: str = None, limit: int = 20):
    """
    Print keyed_store rows, newest first.

    Args:
        db_path: Path to SQLite database file
        namespace: Only rows of this store (e.g. location_history)
        key: Only rows of this key (usually a sender id)
        limit: Maximum number of rows to display
    """
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='keyed_store'"
        )
        if not cursor.fetchone():
            print(f"✗ Table 'keyed_store' does not exist in {db_path}")
            return

        cursor.execute(
            "SELECT namespace, COUNT(*) FROM keyed_store GROUP BY namespace ORDER BY namespace"
        )
        counts = cursor.fetchall()
        print(f"Bot state database: {db_path}")
        for name, count in counts:
            print(f"  {name}: {count} rows")
        print()

        clauses, params = [], []
        if namespace:
            clauses.append("namespace = ?")
            params.append(namespace)
        if key:
            clauses.append("key = ?")
            params.append(key)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        cursor.execute(
            f"""
            SELECT namespace, key, data, expires_at, updated_at
            FROM keyed_store
            {where}
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (*params, limit),
        )
        rows = cursor.fetchall()
        if not rows:
            print("(No matching rows)")
            return

        now = time.time()
        print("-" * 80)
        for row_namespace, row_key, data_json, expires_at, updated_at in rows:
            status = ""
            if expires_at is not None and now >= expires_at:
                status = " (expired)"
            print(f"[{row_namespace}] {row_key}{status}")
            print(f"    Updated: {updated_at}")
            try:
                print(f"    Data: {json.dumps(json.loads(data_json))}")
            except json.JSONDecodeError:
                print(f"    Data: (corrupted JSON: {data_json[:50]}...)")
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser(description="Inspect the bot's SQLite state")
    parser.add_argument("--db", default="./bot_state.db", help="Path to SQLite database")
    parser.add_argument("--namespace", help="Store namespace to show")
    parser.add_argument("--key", help="Key (sender id) to show")
    parser.add_argument("--limit", type=int, default=20, help="Rows to display")
    args = parser.parse_args()

    if not Path(args.db).exists():
        print(f"✗ Database not found: {args.db}")
        return 1

    inspect_database(args.db, args.namespace, args.key, args.limit)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
