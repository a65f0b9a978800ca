"""Location resolution and service-center proximity ranking."""
