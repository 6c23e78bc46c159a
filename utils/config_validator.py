_SECTIONS = ["ACCOUNT", "SCHEDULER", "LEARNING", "GRADUATION", "SCAM_FILTER"]


def validate_config(config: dict):
    required_keys = ["SYMBOLS"] + _SECTIONS

    missing = [k for k in required_keys if k not in config]
    if missing:
        raise ValueError(f"Missing required configuration keys: {missing}")

    if not isinstance(config["SYMBOLS"], list) or not config["SYMBOLS"]:
        raise TypeError("SYMBOLS must be a non-empty list.")

    for key in _SECTIONS:
        if not isinstance(config[key], dict):
            raise TypeError(f"{key} must be a dictionary.")

    scheduler = config["SCHEDULER"]
    lo = scheduler.get("resolution_delay_min")
    hi = scheduler.get("resolution_delay_max")
    if lo is not None and hi is not None and hi < lo:
        raise ValueError("RESOLUTION_DELAY_MAX must be >= RESOLUTION_DELAY_MIN.")

    for key in ("TELEGRAM", "DATABASE"):
        if key in config and not isinstance(config[key], dict):
            raise TypeError(f"{key} must be a dictionary.")
