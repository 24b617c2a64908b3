def is_valid_email_format(address: str | None) -> bool:
    """Loose address check shared by every entry point that accepts an email.

    Requires a non-blank value containing ``@`` and ``.`` where the first ``@``
    comes before the last ``.``. Deliberately weaker than RFC 5322.
    """
    if address is None or not address.strip():
        return False
    email = address.strip()
    return "@" in email and "." in email and email.index("@") < email.rindex(".")
