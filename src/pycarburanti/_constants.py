"""Internal constants shared across the library."""

# See https://www.mimit.gov.it/index.php/it/open-data/elenco-dataset/carburanti-prezzi-praticati-e-anagrafica-degli-impianti
PRICES_CSV_URL = "https://www.mimit.gov.it/images/exportCSV/prezzo_alle_8.csv"
STATIONS_CSV_URL = "https://www.mimit.gov.it/images/exportCSV/anagrafica_impianti_attivi.csv"

USER_AGENT = "pycarburanti"
CSV_DELIMITER = ";"

# ------------------------------------------------------------------
# Feed layout
# ------------------------------------------------------------------

#: The price feed carries a two-line, non-CSV header.
PRICES_HEADER_LINES = 2
PRICES_FIELD_COUNT = 5

STATIONS_HEADER_LINES = 1
#: Station rows carry 10 fields, or 11 when the address is duplicated.
STATIONS_FIELD_COUNTS: frozenset[int] = frozenset({10, 11})

PRICE_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"

# Go-compatible boolean literals used by the price feed.
TRUE_LITERALS: frozenset[str] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS: frozenset[str] = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# ------------------------------------------------------------------
# Exposition
# ------------------------------------------------------------------

METRIC_NAME = "osservatorio_carburanti_price"
METRIC_HELP = "Fuel prices from Osservatorio Carburanti"
METRIC_LABELS: tuple[str, ...] = (
    "station_id",
    "fuel_type",
    "self_service",
    "name",
    "type",
    "municipality",
    "province",
    "brand",
)

DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_LISTEN = ":9112"
DEFAULT_INTERVAL_SECONDS: float = 6 * 3600
DEFAULT_CACHE_TTL_SECONDS: float = 3600
