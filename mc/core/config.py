import json
from mc.common.logger import LOG_LEVELS, log
from mc.common.setup import PATHS

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.data / "settings.json"

# Default values for every setting, and the type each one has to be.
_SETTINGS_DEFAULTS = {
    "chronometer_count": 15,
    "refresh_ms": 10,
    "default_save_file": "timers.json",
    "default_export_file": "timers.csv",
    "confirm_quit": True,
    "log_level": "INFO",
}
# Integers that also have to be at least 1
_POSITIVE_INTS = ("chronometer_count", "refresh_ms")

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

def _is_valid(key, value):
    default = _SETTINGS_DEFAULTS[key]
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        return value >= 1 if key in _POSITIVE_INTS else True
    if key == "log_level":
        return value in LOG_LEVELS
    return isinstance(value, type(default))

#endregion === Helpers and Paths ===

#region === Saving and Loading Settings ===

# Loads settings from PATHS.data / settings.json, defaulting anything missing or malformed. A fresh defaults
# file is written the first time round.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            settings = build_default_settings()
            save_settings(settings)
            log.info("No existing settings.json found, loading fresh settings dict.")
            return settings

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            log.warning(f"settings.json at '{SETTINGS_PATH}' is not an object, falling back to defaults.")
            return build_default_settings()

        settings = {}
        defaulted_values = set()
        for key, default in _SETTINGS_DEFAULTS.items():
            if key in raw and _is_valid(key, raw[key]):
                settings[key] = raw[key]
            else:
                defaulted_values.add(key)
                settings[key] = default

        # Log results
        if defaulted_values:
            log.warning(f"Successfully loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return settings
    # Fall back to a fresh settings dict in case of error, but warn in log
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default settings.",exc_info=True)
        return build_default_settings()

# Write the given settings to disk under PATHS.data / settings.json
def save_settings(settings):
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
