"""Configuration storage bookkeeping for a database administration front-end."""
