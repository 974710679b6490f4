"""A postal address definition, composed into other definitions in tests."""

ADDRESS = {
    "street1": "string",
    "street2": {"type": "string", "default": ""},
    "city": "string",
    "state": {
        "type": "string",
        "validation": lambda s: len(s) == 2,
    },
    # format check only; country specific rules belong in the handler
    "postalCode": {
        "type": "string",
        "validation": {"pattern": r"[0-9]{5}(?:-[0-9]{4})?", "message": "postalCode must be a US ZIP code"},
    },
}
