FRIENDLY_MESSAGES = {
    "IntegrityError": "The change conflicts with existing records. Please refresh and try again.",
    "OperationalError": "Temporary issue while accessing data. Please try again shortly.",
    "ConnectionError": "Unable to connect to a required service. Please try again later.",
    "TimeoutError": "The request took too long. Please try again later.",
    "CircuitOpenError": "The service is recovering from errors. Please try again shortly.",
}


def get_friendly_message(error: Exception) -> str:
    name = type(error).__name__
    for key, msg in FRIENDLY_MESSAGES.items():
        if key.lower() in name.lower():
            return msg
    return "Something went wrong on our end. Please try again."
