"""gls: installer and updater for gitpod-laravel-starter projects."""

__version__ = "1.0.0"
