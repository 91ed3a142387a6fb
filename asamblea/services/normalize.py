def _text(raw):
    # JSON clients may send IDs and apartments as numbers.
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        return ""
    return str(raw).strip()


def national_id(raw):
    return _text(raw)


def apartment(raw):
    return _text(raw).upper()
