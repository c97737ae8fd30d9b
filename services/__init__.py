"""
services — user directory and authentication services plus their wiring.
"""
