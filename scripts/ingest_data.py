from nyc_shootings.config import Config
from nyc_shootings.ingest.fetcher import ShootingFetcher, UnemploymentFetcher
from nyc_shootings.utils.logging import console

def main():
    # Configuration
    Config.initialize_folders()

    # 1. Incidents (NYC Open Data)
    shootings_path = ShootingFetcher(Config.DATA_DIR, max_retries=3).download(force=True)

    # 2. Unemployment (BLS LAUS metro table)
    unemployment_path = UnemploymentFetcher(Config.DATA_DIR, max_retries=3).download(force=True)

    console.print(f"Sources refreshed:\n  {shootings_path}\n  {unemployment_path}")

if __name__ == "__main__":
    main()
