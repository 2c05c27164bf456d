"""Mining proxy building blocks: health state, pool setup and relays, share accounting, hashrates."""

__version__ = "0.1.5"