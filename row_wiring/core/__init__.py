"""Configuration, naming, class loading and errors."""
