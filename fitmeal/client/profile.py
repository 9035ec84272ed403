def get_initials(email: str) -> str:
    """Avatar initials from the local part of an email, split on dots, at most 3 letters.

    >>> get_initials("john.doe@example.com")
    'JD'
    """
    local = (email or "").split("@", 1)[0]
    return "".join(part[0] for part in local.split(".") if part).upper()[:3]
