# Jinja and session helpers
