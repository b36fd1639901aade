"""
Constants and environment overrides shared across permitscout.
"""
import os

# State name -> two-digit FIPS code
STATE_FIPS = {
    "Alabama": "01", "Alaska": "02", "Arizona": "04", "Arkansas": "05", "California": "06",
    "Colorado": "08", "Connecticut": "09", "Delaware": "10", "Florida": "12", "Georgia": "13",
    "Hawaii": "15", "Idaho": "16", "Illinois": "17", "Indiana": "18", "Iowa": "19",
    "Kansas": "20", "Kentucky": "21", "Louisiana": "22", "Maine": "23", "Maryland": "24",
    "Massachusetts": "25", "Michigan": "26", "Minnesota": "27", "Mississippi": "28", "Missouri": "29",
    "Montana": "30", "Nebraska": "31", "Nevada": "32", "New Hampshire": "33", "New Jersey": "34",
    "New Mexico": "35", "New York": "36", "North Carolina": "37", "North Dakota": "38", "Ohio": "39",
    "Oklahoma": "40", "Oregon": "41", "Pennsylvania": "42", "Rhode Island": "44", "South Carolina": "45",
    "South Dakota": "46", "Tennessee": "47", "Texas": "48", "Utah": "49", "Vermont": "50",
    "Virginia": "51", "Washington": "53", "West Virginia": "54", "Wisconsin": "55", "Wyoming": "56",
}

FIPS_TO_STATE = {fips: name for name, fips in STATE_FIPS.items()}

FIPS_TO_ABBR = {
    "01": "AL", "02": "AK", "04": "AZ", "05": "AR", "06": "CA", "08": "CO",
    "09": "CT", "10": "DE", "11": "DC", "12": "FL", "13": "GA", "15": "HI",
    "16": "ID", "17": "IL", "18": "IN", "19": "IA", "20": "KS", "21": "KY",
    "22": "LA", "23": "ME", "24": "MD", "25": "MA", "26": "MI", "27": "MN",
    "28": "MS", "29": "MO", "30": "MT", "31": "NE", "32": "NV", "33": "NH",
    "34": "NJ", "35": "NM", "36": "NY", "37": "NC", "38": "ND", "39": "OH",
    "40": "OK", "41": "OR", "42": "PA", "44": "RI", "45": "SC", "46": "SD",
    "47": "TN", "48": "TX", "49": "UT", "50": "VT", "51": "VA", "53": "WA",
    "54": "WV", "55": "WI", "56": "WY"
}

# Relative population weights used as the stats factor for each state
STATE_POP = {
    "01": 5, "02": 1, "04": 7, "05": 3, "06": 39, "08": 6, "09": 4, "10": 1, "12": 22, "13": 11,
    "15": 1, "16": 2, "17": 13, "18": 7, "19": 3, "20": 3, "21": 4, "22": 5, "23": 1, "24": 6,
    "25": 7, "26": 10, "27": 6, "28": 3, "29": 6, "30": 1, "31": 2, "32": 3, "33": 1, "34": 9,
    "35": 2, "36": 20, "37": 10, "38": 1, "39": 12, "40": 4, "41": 4, "42": 13, "44": 1, "45": 5,
    "46": 1, "47": 7, "48": 29, "49": 3, "50": 1, "51": 9, "53": 8, "54": 2, "55": 6, "56": 1
}

# Seeds for the dataset-wide stats passes
STATE_STATS_SEED = 42
COUNTY_STATS_SEED = 7919

# Identity hash multiplier (sum of character codes * multiplier)
IDENTITY_SEED_MULTIPLIER = 12345

# Suffixes stripped from OSM / Census county names before matching
COUNTY_SUFFIXES = (" County", " Parish", " Borough", " Census Area", " Municipality")

# OSM admin_level values
ADMIN_LEVEL_COUNTRY = "2"
ADMIN_LEVEL_STATE = "4"
ADMIN_LEVEL_COUNTY = "6"
ADMIN_LEVEL_UNKNOWN = "unknown"

# ---------- Remote sources ----------
STATES_TOPO_URL = os.environ.get("PS_STATES_TOPO_URL", "https://cdn.jsdelivr.net/npm/us-atlas@3/states-10m.json")
COUNTIES_TOPO_URL = os.environ.get("PS_COUNTIES_TOPO_URL", "https://cdn.jsdelivr.net/npm/us-atlas@3/counties-10m.json")
CENSUS_COUNTY_NAMES_URL = os.environ.get(
    "PS_CENSUS_COUNTY_NAMES_URL",
    "https://api.census.gov/data/2020/dec/pl?get=NAME&for=county:*",
)

OVERPASS_URLS = [
    u.strip()
    for u in os.environ.get(
        "PS_OVERPASS_URLS",
        "https://overpass-api.de/api/interpreter,https://overpass.kumi.systems/api/interpreter",
    ).split(",")
    if u.strip()
]
NOMINATIM_URL = os.environ.get("PS_NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
USER_AGENT = os.environ.get("PS_USER_AGENT", "permitscout/0.1")

HTTP_TIMEOUT_SEC = float(os.environ.get("PS_HTTP_TIMEOUT_SEC", "30"))
OVERPASS_MAX_ATTEMPTS = int(os.environ.get("PS_OVERPASS_MAX_ATTEMPTS", "3"))

# ---------- API ----------
API_HOST = os.environ.get("PS_API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PS_API_PORT", "5173"))
FRONTEND_ORIGIN = (os.environ.get("PS_FRONTEND_ORIGIN") or "*").strip()
