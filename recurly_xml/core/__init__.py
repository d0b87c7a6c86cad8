"""Configuration, authentication headers and the ``requests`` transport."""
