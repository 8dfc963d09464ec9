CONFIG = {
    # Probe calendar
    "REFERENCE_YEAR": 2011,
    "JANUARY_PROBE": (1, 1),  # month, day at local midnight
    "JUNE_PROBE": (6, 1),

    # Signature keys
    "SOUTHERN_SUFFIX": ",s",
}
