"""Configuration, persistence and OpenQASM interchange."""
