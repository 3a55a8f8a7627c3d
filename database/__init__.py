"""SQLite storage for maps, runs and the job log."""
