"""Internal constants shared across the package."""

BASE_URL = "https://echtzeit.swu.de"
USER_AGENT = "swu2influx/1.0"

XML_DATA_PATH = "/php/phpsqlajax_genxml.php?src=gps"
JSON_DATA_PATH = "/php/phpsqlajax_genjson.php?src=gps"

DEFAULT_DATABASE = "position_data"
DEFAULT_MEASUREMENT = "position"
DEFAULT_POLL_INTERVAL = 15.0
DEFAULT_INFLUX_PORT = 8086

# Upstream vehicle type codes -> stored tag values.
VEHICLE_TYPES: dict[str, str] = {
    "Strab": "tram",
    "Bus": "bus",
    "Schienenschleifzug": "railgrinder",
}

# Stored when the feed gives no vehicle type; InfluxDB rejects empty tags.
UNKNOWN_VEHICLE_TYPE = "unknown"
