"""Account services: guest lifecycle, registered accounts and sessions."""
