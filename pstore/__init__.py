"""pstore - transactional uploads of app binaries to Google Play."""

__version__ = "1.0.0"
