import os
from dotenv import load_dotenv
from pathlib import Path

root_dir = Path(__file__).resolve().parent.parent
env_path = root_dir / ".env"

load_dotenv(env_path)

class Config:
    SHOOTING_DATA_URL = os.getenv(
        "SHOOTING_DATA_URL",
        "https://data.cityofnewyork.us/api/views/833y-7hv8/rows.csv?accessType=DOWNLOAD",
    )
    UNEMPLOYMENT_URL = os.getenv("UNEMPLOYMENT_URL", "https://www.bls.gov/web/metro/ssamatab1.txt")
    # bls.gov answers 403 to the default python-requests agent
    HTTP_USER_AGENT = os.getenv(
        "HTTP_USER_AGENT",
        "Mozilla/5.0 (X11; Linux x86_64) nyc-shootings-analysis",
    )

    DATA_DIR = Path(os.getenv("SHOOTINGS_DATA_DIR", "./data"))
    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR_SHOOTINGS", "./outputs/shootings"))

    BOROUGHS = ("BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND")

    # 2010 census snapshot. Applied to every year, so later years are
    # slightly overstated where a borough has grown since.
    BOROUGH_POPULATION = {
        "BRONX": 1385108,
        "BROOKLYN": 2504700,
        "MANHATTAN": 1585873,
        "QUEENS": 2230722,
        "STATEN ISLAND": 468730,
    }

    METRO_AREA = "New York-Newark-Jersey City"
    # Exclusive bounds: keeps 2006..2020
    UNEMPLOYMENT_YEAR_RANGE = (2005, 2021)

    TRAINING_CUTOFF_YEAR = 2008
    GEO_MIN_YEAR = 2020
    GEO_BIN_WIDTH = 0.01
    SPLINE_DF = 5

    @classmethod
    def initialize_folders(cls):
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
