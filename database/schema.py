"""Schema for the campaign wrapped store."""

MAPS_TABLE = "maps"
RUNS_TABLE = "runs"
JOB_LOG_TABLE = "job_log"

CREATE_MAPS_TABLE = """
    CREATE TABLE IF NOT EXISTS maps (
        uid TEXT PRIMARY KEY,
        day INTEGER NOT NULL,
        month INTEGER NOT NULL,
        year INTEGER NOT NULL,
        bronze_time INTEGER NOT NULL,
        silver_time INTEGER NOT NULL,
        gold_time INTEGER NOT NULL,
        author_time INTEGER NOT NULL,
        thumbnail_url TEXT
    )
"""

CREATE_RUNS_TABLE = """
    CREATE TABLE IF NOT EXISTS runs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        map_uid TEXT NOT NULL,
        user_id TEXT NOT NULL,
        time INTEGER NOT NULL,
        medal TEXT NOT NULL,  -- 'AUTHOR', 'GOLD', 'SILVER', 'BRONZE', 'NONE'
        position INTEGER NOT NULL,
        FOREIGN KEY(map_uid) REFERENCES maps(uid),
        UNIQUE(map_uid, user_id)
    )
"""

CREATE_JOB_LOG_TABLE = """
    CREATE TABLE IF NOT EXISTS job_log (
        job_id TEXT PRIMARY KEY,
        job_type TEXT NOT NULL,
        environment TEXT NOT NULL,
        status TEXT NOT NULL,
        season INTEGER,
        records_processed INTEGER DEFAULT 0,
        records_inserted INTEGER DEFAULT 0,
        error_message TEXT,
        metadata TEXT,
        start_time TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        end_time TIMESTAMP
    )
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_maps_season ON maps(year, month, day)",
    "CREATE INDEX IF NOT EXISTS idx_runs_user ON runs(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_runs_map_position ON runs(map_uid, position)",
    "CREATE INDEX IF NOT EXISTS idx_job_log_season ON job_log(season, start_time)",
]

SCHEMA_STATEMENTS = [CREATE_MAPS_TABLE, CREATE_RUNS_TABLE, CREATE_JOB_LOG_TABLE, *INDEXES]
