"""Core domain: telegram decoding, OBIS table and ports."""
