"""Safety checks applied to untrusted import artifacts."""
