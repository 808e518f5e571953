import duckdb

class DatabaseManager:
    """In-memory DuckDB connection used to run the aggregation SQL over pandas frames."""

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self.conn = None

    def connect(self):
        if not self.conn:
            self.conn = duckdb.connect(self.db_path)
        return self.conn

    def register(self, name: str, df):
        """Exposes a DataFrame to SQL under `name`, replacing any earlier frame of that name."""
        conn = self.connect()
        conn.register(name, df)
        return conn

    def q_to_df(self, sql, params=None):
        """Standardizes DuckDB output to lowercase for Seaborn/Pandas compatibility."""
        conn = self.connect()
        df = (conn.execute(sql, params) if params else conn.execute(sql)).df()
        df.columns = [c.lower() for c in df.columns]
        return df

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
