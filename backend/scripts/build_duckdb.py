#!/usr/bin/env python3
"""Build the reference DuckDB database from CSV exports.

Expected CSV files (one table each, file stem = table name):
    heroes.csv            id, name, roles, tier, win_rate
    hero_combos.csv       hero_a, hero_b, synergy_score
    matchups.csv          hero, opponent, win_rate
    team_hero_pool.csv    team_id, hero_id, matches_played
    team_first_picks.csv  team_id, hero_id, win_rate, pick_count, rank
    team_threats.csv      team_id, hero_id, win_rate, threat_level, rank
    strategies.csv        id, team_id, name, win_rate
    strategy_heroes.csv   strategy_id, hero_id, kind (core|avoid)

Usage:
    python scripts/build_duckdb.py <csv_dir> [output.duckdb]
"""
import sys
from pathlib import Path

import duckdb

REQUIRED_TABLES = {"heroes"}


def build_duckdb(data_path: Path, output_path: Path | None = None) -> Path:
    """Build DuckDB database from CSV files in data_path.

    Args:
        data_path: Directory containing CSV files
        output_path: Where to write the .duckdb file (default: data_path/draft_data.duckdb)

    Returns:
        Path to the created database file
    """
    if output_path is None:
        output_path = data_path / "draft_data.duckdb"

    if output_path.exists():
        output_path.unlink()
        print(f"Removed existing {output_path}")

    csv_files = sorted(data_path.glob("*.csv"))
    missing = REQUIRED_TABLES - {f.stem.replace("-", "_") for f in csv_files}
    if missing:
        raise FileNotFoundError(f"Missing required CSV files in {data_path}: {', '.join(sorted(missing))}")

    print(f"Building {output_path} from {len(csv_files)} CSV files...")
    with duckdb.connect(str(output_path)) as conn:
        for csv_file in csv_files:
            table_name = csv_file.stem.replace("-", "_")
            # all_varchar keeps hero ids as strings; the repository converts numerics
            conn.execute(f"""
                CREATE TABLE {table_name} AS
                SELECT * FROM read_csv('{csv_file}', header=true, all_varchar=true)
            """)
            row_count = conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
            print(f"  {table_name}: {row_count:,} rows")

        tables = conn.execute("SHOW TABLES").fetchall()
    print(f"\nCreated {len(tables)} tables in {output_path}")
    return output_path


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    data_path = Path(sys.argv[1])
    output_path = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    if not data_path.exists():
        print(f"Error: Data path not found: {data_path}")
        sys.exit(1)

    db_path = build_duckdb(data_path, output_path)
    print(f"\nDone! Database ready at: {db_path}")


if __name__ == "__main__":
    main()
