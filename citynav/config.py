"""Configuration settings for citynav."""

import os

CONFIG = {
    "gps_poll_interval": 3,  # seconds
    "log_interval": 10,  # seconds between status log entries
    "default_language": "en",
    # Announcement thresholds
    "close_range_distance": 30,  # meters - maneuver spoken as an immediate command
    "pre_announce_distance": 300,  # meters - maneuver spoken once as an early warning
    # Straight-line fallback speeds
    "assumed_speed_mps": {
        "walking": 1.39,  # ~5 km/h
        "driving": 13.89,  # ~50 km/h
    },
    # Routing providers
    "provider_timeout": 30,  # seconds per request
    "provider_order": {
        "walking": ["openrouteservice", "graphhopper", "osrm"],
        "driving": ["openrouteservice", "osrm"],
    },
    "openrouteservice_url": "https://api.openrouteservice.org",
    "openrouteservice_api_key": os.environ.get("ORS_API_KEY"),
    "graphhopper_url": "https://graphhopper.com/api/1",
    "graphhopper_api_key": os.environ.get("GRAPHHOPPER_API_KEY"),
    "osrm_url": "https://router.project-osrm.org",
    # Providers are asked for English text; the localizer translates
    "provider_language": "en",
}
