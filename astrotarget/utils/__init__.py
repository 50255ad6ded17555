"""Physical constants and unit conversions."""
