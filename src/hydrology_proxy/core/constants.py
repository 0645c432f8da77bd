"""
Application-wide constants for the hydrology proxy.

Upstream endpoints, provenance labels and rounding precision.
Variable metadata lives in models.variable.
"""

# Upstream endpoints
DATA_RODS_BASE_URL = "https://hydro1.gesdisc.eosdis.nasa.gov/daac-bin/access/timeseries.cgi"
GIOVANNI_BASE_URL = "https://giovanni.gsfc.nasa.gov/giovanni"
WORLDVIEW_BASE_URL = "https://worldview.earthdata.nasa.gov"
EARTHDATA_SEARCH_URL = "https://search.earthdata.nasa.gov"
CPTEC_BASE_URL = "https://satellite.cptec.inpe.br/repositorio"

# Request defaults
USER_AGENT = "NASA-Weather-App/1.0"
ACCEPT_HEADER = "application/json, text/plain, */*"
SORT_ORDER = "asc"
DEFAULT_FORMAT = "json"
HEALTH_PATH = "/health"

# Proxy defaults
DEFAULT_PROXY_URL = "http://localhost:3001"
DEFAULT_PORT = 3001
DEFAULT_HEALTH_TIMEOUT_MS = 5000
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:3000",
]

# Provenance labels
SOURCE_UPSTREAM = "NASA GES DISC"
SOURCE_FALLBACK = "Mock Data (NASA API failed)"
SOURCE_MOCK_MODE = "Mock Data (NASA API proxy fallback)"
SOURCE_ERROR = "Mock Data (Error occurred)"
SOURCE_LOCAL_MOCK = "Mock Data (NASA APIs blocked by CORS)"
SOURCE_PROXY = "NASA Data Proxy Server"

# Rounding precision
SYNTHETIC_DECIMALS = 2
TEXT_DECIMALS = 3

# External link defaults
GIOVANNI_DEFAULT_VARIABLE = "GPM_3IMERGM_06_precipitation"
GIOVANNI_DEFAULT_DAYS = 30
GIOVANNI_BBOX_DELTA = 0.1
GIOVANNI_VARIABLE_FACETS = "dataFieldMeasurement%3APrecipitation%3B"
WORLDVIEW_DEFAULT_LAYERS = "MODIS_Terra_CorrectedReflectance_TrueColor"
WORLDVIEW_BBOX_DELTA = 2
EARTHDATA_DEFAULT_KEYWORDS = "precipitation,temperature"

# South America bounds (CPTEC coverage)
SOUTH_AMERICA_BOUNDS = {
    "min_lat": -60.0,
    "max_lat": 15.0,
    "min_lon": -85.0,
    "max_lon": -30.0,
}
