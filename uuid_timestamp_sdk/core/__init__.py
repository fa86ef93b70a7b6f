"""Core decoding: matcher, timestamp decoder, relative-time formatter."""
