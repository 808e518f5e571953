import os
import requests
import pandas as pd
from nyc_shootings.config import Config
from nyc_shootings.errors import SourceUnavailable
from nyc_shootings.utils.logging import console

# ssamatab1.txt opens with a title block before the first data row
UNEMPLOYMENT_HEADER_LINES = 5


class _SourceFetcher:
    URL = None
    FILENAME = None

    def __init__(self, data_dir=None, url=None, max_retries=1):
        self.data_dir = str(data_dir or Config.DATA_DIR)
        self.url = url or self.URL
        self.max_retries = max_retries
        os.makedirs(self.data_dir, exist_ok=True)

    @property
    def local_path(self):
        return os.path.join(self.data_dir, self.FILENAME)

    def download(self, force=False):
        """Streams the source to disk, reusing an earlier non-empty download."""
        local_path = self.local_path

        if not force and os.path.exists(local_path) and os.path.getsize(local_path) > 0:
            console.print(f"  ↪ {self.FILENAME} already exists. Skipping download.")
            return local_path

        headers = {"User-Agent": Config.HTTP_USER_AGENT}
        for attempt in range(self.max_retries):
            try:
                console.print(f"Downloading {self.FILENAME} (Attempt {attempt+1})...")
                with requests.get(self.url, headers=headers, stream=True, timeout=60) as r:
                    r.raise_for_status()
                    with open(local_path, "wb") as f:
                        for chunk in r.iter_content(chunk_size=1024*1024):
                            f.write(chunk)
                return local_path
            except requests.RequestException as e:
                console.print(f"[red]Download failed: {e}[/red]")
                if os.path.exists(local_path):
                    os.remove(local_path)
                if attempt == self.max_retries - 1:
                    raise SourceUnavailable(f"Could not fetch {self.url}: {e}") from e
        return None


class ShootingFetcher(_SourceFetcher):
    # Direct CSV export link for the NYC Open Data portal
    URL = Config.SHOOTING_DATA_URL
    FILENAME = "nypd_shootings_raw.csv"


class UnemploymentFetcher(_SourceFetcher):
    # BLS LAUS metropolitan area table, fixed-width text
    URL = Config.UNEMPLOYMENT_URL
    FILENAME = "ssamatab1.txt"


def load_incidents(csv_path):
    """Reads the incident export with every field kept as text."""
    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, na_values=[""])
    except (FileNotFoundError, pd.errors.EmptyDataError) as e:
        raise SourceUnavailable(f"Could not read incident data at {csv_path}: {e}") from e
    console.print(f"Incident export loaded: {len(df):,} rows.")
    return df


def load_unemployment(txt_path, skip_lines=UNEMPLOYMENT_HEADER_LINES):
    """
    Reads the fixed-width table as raw lines.
    Positional decoding happens in UnemploymentProcessor, so each row here is
    the untouched line (trailing newline removed) in a single `raw_line` column.
    """
    try:
        with open(txt_path, encoding="latin-1") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise SourceUnavailable(f"Could not read unemployment table at {txt_path}: {e}") from e

    rows = [line for line in lines[skip_lines:] if line.strip()]
    console.print(f"Unemployment table loaded: {len(rows):,} lines.")
    return pd.DataFrame({"raw_line": rows})
