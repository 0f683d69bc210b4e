"""Asset files across pluggable storage volumes for Wagtail."""
