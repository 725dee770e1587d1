"""Reading importers for the meter reading store."""
