"""Commons package - shared infrastructure, settings and telemetry."""
