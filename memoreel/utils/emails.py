def normalize_email(value: str) -> str:
    """Canonical form for stored and looked-up addresses: trimmed, lower case."""
    return value.strip().lower()
